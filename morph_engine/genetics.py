"""
genetics.py - 멘델 유전 법칙 구현
부모 유전자 상태 -> 배우자 -> 자손 결과 분포 (유전자별 퍼넷 사각형)
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .gene_library import GeneDictionary, get_default_dictionary
from .models import GeneCategory, GeneProfileEntry, GeneResult, Outcome, format_probability_percent
from .profile import GeneProfile, infer_group

logger = logging.getLogger(__name__)


@dataclass
class InheritanceConfig:
    """계산 설정"""
    noise_threshold: float = 1e-4      # 이보다 작은 결과는 수치 잡음으로 버림


# (상태, 확률) 목록
StateDistribution = List[Tuple[object, float]]


@dataclass
class ParentState:
    """부모 한쪽의 해석된 상태"""
    descriptor: str
    states: StateDistribution


class GeneticsEngine:
    """유전자별 자손 결과 계산기"""

    def __init__(
        self,
        dictionary: Optional[GeneDictionary] = None,
        config: Optional[InheritanceConfig] = None
    ):
        self.dictionary = dictionary or get_default_dictionary()
        self.config = config or InheritanceConfig()

    # --------------------------------------------------------
    # 유전 방식 결정
    # --------------------------------------------------------
    def resolve_inheritance(
        self,
        gene: str,
        male: Optional[GeneProfileEntry],
        female: Optional[GeneProfileEntry]
    ) -> GeneCategory:
        """
        수컷 그룹 -> 암컷 그룹 -> 사전 조회 순으로 OTHER가 아닌 첫 값
        사전에 OTHER로 등록된 유전자는 OTHER, 사전에 없으면 추론
        """
        dictionary_group = self.dictionary.lookup_category(gene)
        for candidate in (
            male.group if male else None,
            female.group if female else None,
            dictionary_group,
        ):
            if candidate is not None and candidate != GeneCategory.OTHER:
                return candidate
        if dictionary_group is not None:
            return dictionary_group
        return infer_group(male) or infer_group(female) or GeneCategory.OTHER

    # --------------------------------------------------------
    # 열성
    # --------------------------------------------------------
    def recessive_parent_state(self, entry: Optional[GeneProfileEntry]) -> ParentState:
        """rr(발현) / Nr(보인자) / {Nr: p, NN: 1-p}(가능성) / NN(정상)"""
        if entry is None:
            return ParentState("Normal", [("NN", 1.0)])
        if entry.visual_count > 0:
            return ParentState("Visual", [("rr", 1.0)])
        if entry.het_count > 0:
            return ParentState("Het", [("Nr", 1.0)])
        best = entry.best_possible_het
        if best is not None:
            return ParentState(
                f"{format_probability_percent(best)} possible het",
                [("Nr", best), ("NN", 1.0 - best)]
            )
        return ParentState("Normal", [("NN", 1.0)])

    @staticmethod
    def recessive_gametes(genotype: str) -> List[Tuple[str, float]]:
        """rr -> r / Nr -> r, N / NN -> N"""
        if genotype == "rr":
            return [("r", 1.0)]
        if genotype in ("Nr", "rN"):
            return [("r", 0.5), ("N", 0.5)]
        return [("N", 1.0)]

    def calc_recessive(
        self,
        gene: str,
        male: Optional[GeneProfileEntry],
        female: Optional[GeneProfileEntry]
    ) -> Tuple[List[Outcome], ParentState, ParentState]:
        sire = self.recessive_parent_state(male)
        dam = self.recessive_parent_state(female)
        labels = {0: "Normal", 1: f"Het {gene}", 2: f"Visual {gene}"}
        mass = self._cross(sire, dam, self.recessive_gametes, "r")
        outcomes = self._to_outcomes({labels[count]: p for count, p in mass.items()})
        return outcomes, sire, dam

    # --------------------------------------------------------
    # 우성 / 불완전 우성
    # --------------------------------------------------------
    def dominant_parent_state(
        self,
        entry: Optional[GeneProfileEntry],
        inheritance: GeneCategory
    ) -> ParentState:
        """변이 대립유전자 개수 2 / 1 / {1: p, 0: 1-p} / 0"""
        if entry is None:
            return ParentState("Normal", [(0, 1.0)])
        if entry.super_visual:
            descriptor = "Super visual" if inheritance == GeneCategory.INCOMPLETE_DOMINANT else "Homozygous visual"
            return ParentState(descriptor, [(2, 1.0)])
        if entry.visual_count > 0:
            return ParentState("Visual", [(1, 1.0)])
        if entry.het_count > 0:
            return ParentState("Carrier", [(1, 1.0)])
        best = entry.best_possible_het
        if best is not None:
            return ParentState(
                f"{format_probability_percent(best)} possible carrier",
                [(1, best), (0, 1.0 - best)]
            )
        return ParentState("Normal", [(0, 1.0)])

    @staticmethod
    def dominant_gametes(copies: int) -> List[Tuple[str, float]]:
        """2개 -> A / 1개 -> A, a / 0개 -> a"""
        if copies >= 2:
            return [("A", 1.0)]
        if copies >= 1:
            return [("A", 0.5), ("a", 0.5)]
        return [("a", 1.0)]

    def calc_dominant(
        self,
        gene: str,
        male: Optional[GeneProfileEntry],
        female: Optional[GeneProfileEntry],
        inheritance: GeneCategory
    ) -> Tuple[List[Outcome], ParentState, ParentState]:
        sire = self.dominant_parent_state(male, inheritance)
        dam = self.dominant_parent_state(female, inheritance)
        mass = self._cross(sire, dam, self.dominant_gametes, "A")

        by_label: Dict[str, float] = {}
        for count, probability in mass.items():
            if count == 0:
                label = "Normal"
            elif count == 2 and inheritance == GeneCategory.INCOMPLETE_DOMINANT:
                label = f"Super {gene}"
            else:
                # 우성은 1개/2개 모두 같은 표현형
                label = gene
            by_label[label] = by_label.get(label, 0.0) + probability
        return self._to_outcomes(by_label), sire, dam

    # --------------------------------------------------------
    # 공통
    # --------------------------------------------------------
    @staticmethod
    def _cross(sire: ParentState, dam: ParentState, gametes, mutant: str) -> Dict[int, float]:
        """부모 상태 분포 x 배우자 분포 -> 변이 대립유전자 개수별 확률"""
        mass: Dict[int, float] = {}
        for sire_state, sire_p in sire.states:
            for dam_state, dam_p in dam.states:
                weight = sire_p * dam_p
                if weight <= 0:
                    continue
                for s_allele, s_p in gametes(sire_state):
                    for d_allele, d_p in gametes(dam_state):
                        probability = weight * s_p * d_p
                        if probability <= 0:
                            continue
                        count = (s_allele == mutant) + (d_allele == mutant)
                        mass[count] = mass.get(count, 0.0) + probability
        return mass

    def _to_outcomes(self, by_label: Dict[str, float]) -> List[Outcome]:
        """잡음 제거 후 합이 1이 되도록 다시 맞추고 확률 내림차순 정렬"""
        kept = {
            label: p for label, p in by_label.items()
            if p > self.config.noise_threshold
        }
        total = sum(kept.values())
        if total <= 0:
            return []
        outcomes = [Outcome(label, p / total) for label, p in kept.items()]
        outcomes.sort(key=lambda o: o.probability, reverse=True)
        return outcomes

    def calculate_gene(
        self,
        key: str,
        male: Optional[GeneProfileEntry],
        female: Optional[GeneProfileEntry]
    ) -> Optional[GeneResult]:
        """
        유전자 하나의 교배 결과

        Returns:
            GeneResult, 정량 모델이 없거나(OTHER) 의미 있는 결과가 없으면 None
        """
        gene = (male.gene if male else None) or (female.gene if female else None) or ""
        if not gene or gene.lower() == "normal":
            return None

        inheritance = self.resolve_inheritance(gene, male, female)
        if inheritance == GeneCategory.RECESSIVE:
            outcomes, sire, dam = self.calc_recessive(gene, male, female)
        elif inheritance in (GeneCategory.INCOMPLETE_DOMINANT, GeneCategory.DOMINANT):
            outcomes, sire, dam = self.calc_dominant(gene, male, female, inheritance)
        else:
            logger.debug("Skipping %s: no inheritance model for %s", gene, inheritance.value)
            return None

        if not any(o.label != "Normal" for o in outcomes):
            return None

        return GeneResult(
            gene=gene,
            key=key,
            inheritance=inheritance,
            outcomes=outcomes,
            sire_descriptor=sire.descriptor,
            dam_descriptor=dam.descriptor,
        )

    def calculate(self, male_profile: GeneProfile, female_profile: GeneProfile) -> List[GeneResult]:
        """두 부모의 모든 유전자에 대한 결과 (유전자 이름순)"""
        male_profile = male_profile or {}
        female_profile = female_profile or {}
        keys = list(male_profile)
        keys.extend(k for k in female_profile if k not in male_profile)

        results = []
        for key in keys:
            result = self.calculate_gene(key, male_profile.get(key), female_profile.get(key))
            if result is not None:
                results.append(result)

        results.sort(key=lambda r: r.gene.lower())
        return results
