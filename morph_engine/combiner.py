"""
combiner.py - 유전자별 결과 결합
독립인 유전자별 분포를 곱해 하나의 결합 분포로 접는다 (단계마다 상위 N개만 유지)
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .models import CombinedOutcome, GeneResult, Outcome

logger = logging.getLogger(__name__)


ALL_NORMAL_LABEL = "Normal (all genes)"


@dataclass
class CombinerConfig:
    """결합 설정"""
    max_combos: int = 1024          # 유전자 하나를 접을 때마다 남기는 최대 조합 수
    limit: int = 12                 # 최종 반환 개수
    min_probability: float = 0.01   # 이 이상인 조합은 우선 포함


@dataclass
class Combo:
    """접는 중의 부분 조합"""
    probability: float
    breakdown: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def key(self) -> str:
        return "|".join(f"{gene}:{label}" for gene, label in self.breakdown)

    @property
    def label(self) -> str:
        parts = [label for _, label in self.breakdown if label and label != "Normal"]
        return " + ".join(parts) if parts else ALL_NORMAL_LABEL


class OutcomeCombiner:
    """
    결합 분포 계산기

    유전자마다 (현재 조합 x 결과) 곱 -> 같은 (유전자, 라벨) 순서쌍 병합 ->
    확률 상위 max_combos개만 남기고 다음 유전자로 진행.
    전체 곱집합 대신 O(유전자 수 x max_combos x 유전자당 결과 수)로 제한된다.
    """

    def __init__(self, config: Optional[CombinerConfig] = None):
        self.config = config or CombinerConfig()

    def fold(self, per_gene: List[GeneResult]) -> List[Combo]:
        """잘라내기 전 결합 분포 (단계별 상한만 적용, 확률 내림차순)"""
        if not per_gene:
            return []

        combos = [Combo(probability=1.0)]
        for result in per_gene:
            outcomes = result.outcomes or [Outcome("Normal", 1.0)]
            merged: Dict[str, Combo] = {}

            for base in combos:
                for outcome in outcomes:
                    probability = base.probability * (outcome.probability or 0.0)
                    if probability <= 0:
                        continue
                    combo = Combo(probability, base.breakdown + [(result.gene, outcome.label)])
                    existing = merged.get(combo.key)
                    if existing:
                        existing.probability += probability
                    else:
                        merged[combo.key] = combo

            combos = sorted(merged.values(), key=lambda c: c.probability, reverse=True)
            if len(combos) > self.config.max_combos:
                logger.debug(
                    "Pruning %d combos to %d after %s",
                    len(combos), self.config.max_combos, result.gene
                )
                combos = combos[:self.config.max_combos]

        return combos

    def combine(self, per_gene: List[GeneResult]) -> List[CombinedOutcome]:
        """
        결합 결과 상위 목록

        확률 내림차순으로 최대 limit개. min_probability 이상인 조합을 먼저 채우고
        자리가 남으면 그 다음 확률 순으로 채운다.
        """
        return self.select(self.fold(per_gene))

    def select(self, combos: List[Combo]) -> List[CombinedOutcome]:
        combos = sorted(combos, key=lambda c: c.probability, reverse=True)
        selected = []
        for combo in combos:
            if combo.probability >= self.config.min_probability or len(selected) < self.config.limit:
                selected.append(combo)

        return [
            CombinedOutcome(
                breakdown=list(combo.breakdown),
                label=combo.label,
                probability=combo.probability,
                key=combo.key,
            )
            for combo in selected[:self.config.limit]
        ]
