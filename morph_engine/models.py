"""
models.py - 핵심 데이터 모델 정의
GeneCategory, GeneToken, GeneProfileEntry, Outcome, GeneResult, CombinedOutcome, Animal
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict, Tuple, Any


class GeneCategory(Enum):
    """유전 방식 분류"""
    RECESSIVE = "Recessive"                       # 열성
    INCOMPLETE_DOMINANT = "Incomplete Dominant"   # 불완전 우성 (슈퍼 형태 존재)
    DOMINANT = "Dominant"                         # 우성
    OTHER = "Other"                               # 정량 모델 없음 (다유전자, 지역형 등)

    @classmethod
    def from_label(cls, label: Optional[str]) -> 'GeneCategory':
        """그룹 이름 문자열 -> 분류 (모르는 값은 OTHER)"""
        for category in cls:
            if label == category.value:
                return category
        return cls.OTHER


# 표시 정렬 가중치 (우성 < 불완전 우성 < 열성 < 기타)
CATEGORY_WEIGHT = {
    GeneCategory.DOMINANT: 0,
    GeneCategory.INCOMPLETE_DOMINANT: 1,
    GeneCategory.RECESSIVE: 2,
    GeneCategory.OTHER: 3,
}


class TokenKind(Enum):
    """토큰 종류"""
    VISUAL = "Visual"   # 표현형으로 발현된 형질
    HET = "Het"         # 보인자 (확정 또는 가능성)


@dataclass(frozen=True)
class DictionaryEntry:
    """유전자 사전 항목 (불변)"""
    canonical_name: str
    category: GeneCategory


@dataclass
class GeneToken:
    """
    분류된 유전자 토큰
    - original: 입력 원문
    - canonical_gene: 정규화된 유전자 이름 ('Super' 접두어 제외)
    - kind: VISUAL / HET
    - probability: 보인자 확률 (확정 보인자 및 발현 형질은 1.0)
    - is_super: 슈퍼 형태(동형접합) 여부
    - percent: 명시된 백분율 문자열 (예: '50%')
    - qualifier: 'Possible' / 'Probable' / 'Maybe'
    """
    original: str
    canonical_gene: str
    kind: TokenKind
    probability: float = 1.0
    is_super: bool = False
    percent: Optional[str] = None
    qualifier: Optional[str] = None

    @property
    def is_certain(self) -> bool:
        return self.probability >= 0.999

    @property
    def record_form(self) -> str:
        """레코드 저장 형식 ('50% Clown', 'Possible Clown', 'Super Pastel')"""
        if self.kind == TokenKind.VISUAL:
            return f"Super {self.canonical_gene}" if self.is_super else self.canonical_gene
        parts = [p for p in (self.percent, self.qualifier, self.canonical_gene) if p]
        return " ".join(parts)

    @property
    def display_form(self) -> str:
        """표시 형식 ('50% Het Clown', 'Possible Het Clown')"""
        if self.kind == TokenKind.VISUAL:
            return self.record_form
        parts = [p for p in (self.percent, self.qualifier) if p]
        parts.extend(["Het", self.canonical_gene])
        return " ".join(parts)


@dataclass
class ClassifiedTokens:
    """분류 결과 - 발현 형질 목록과 보인자 목록"""
    visual: List[str] = field(default_factory=list)
    het: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List[str]]:
        return {'visual': list(self.visual), 'het': list(self.het)}


@dataclass
class Animal:
    """
    개체 레코드 (외부 레코드 계층에서 전달)
    - morphs: 발현 형질 토큰 목록
    - hets: 보인자 토큰 목록
    """
    id: str = ""
    name: str = ""
    sex: str = "F"
    morphs: List[str] = field(default_factory=list)
    hets: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Animal':
        """딕셔너리(JSON)에서 개체 생성"""
        return cls(
            id=str(data.get('id') or ""),
            name=str(data.get('name') or ""),
            sex=str(data.get('sex') or "F"),
            morphs=_as_token_list(data.get('morphs')),
            hets=_as_token_list(data.get('hets')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'sex': self.sex,
            'morphs': list(self.morphs),
            'hets': list(self.hets),
        }


def _as_token_list(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value if v is not None and str(v).strip()]


@dataclass
class GeneProfileEntry:
    """
    한 개체의 유전자별 상태
    - gene: 표시 이름
    - key: 정규화 키 (대소문자/공백 무시)
    - group: 유전 방식 (사전 조회 또는 추론, 알 수 없으면 None)
    """
    gene: str
    key: str
    group: Optional[GeneCategory] = None
    visual_count: int = 0
    super_visual: bool = False
    het_count: int = 0
    possible_het_probabilities: List[float] = field(default_factory=list)
    morph_tokens: List[str] = field(default_factory=list)
    het_tokens: List[str] = field(default_factory=list)

    @property
    def best_possible_het(self) -> Optional[float]:
        """가장 높은 보인자 가능성 (0보다 큰 값만)"""
        candidates = [p for p in self.possible_het_probabilities if p > 0]
        if not candidates:
            return None
        return max(0.0, min(1.0, max(candidates)))

    @property
    def has_het_signal(self) -> bool:
        return self.het_count > 0 or self.best_possible_het is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'gene': self.gene,
            'key': self.key,
            'group': self.group.value if self.group else None,
            'visual_count': self.visual_count,
            'super_visual': self.super_visual,
            'het_count': self.het_count,
            'possible_het_probabilities': list(self.possible_het_probabilities),
            'morph_tokens': list(self.morph_tokens),
            'het_tokens': list(self.het_tokens),
        }


@dataclass
class Outcome:
    """유전자 하나에 대한 자손 결과 한 줄"""
    label: str
    probability: float

    def to_dict(self) -> Dict[str, Any]:
        return {'label': self.label, 'probability': self.probability}


@dataclass
class GeneResult:
    """
    유전자별 교배 결과
    - inheritance: 적용된 유전 방식
    - sire_descriptor / dam_descriptor: 부모 상태 설명 (예: '50% possible het')
    """
    gene: str
    key: str
    inheritance: GeneCategory
    outcomes: List[Outcome] = field(default_factory=list)
    sire_descriptor: str = "Normal"
    dam_descriptor: str = "Normal"

    @property
    def notes(self) -> str:
        parts = [f"Inheritance: {self.inheritance.value}"]
        if self.sire_descriptor:
            parts.append(f"Sire: {self.sire_descriptor}")
        if self.dam_descriptor:
            parts.append(f"Dam: {self.dam_descriptor}")
        return " • ".join(parts)

    @property
    def total_probability(self) -> float:
        return sum(o.probability for o in self.outcomes)

    def get_probability(self, label: str) -> float:
        """라벨의 확률 (없으면 0)"""
        for outcome in self.outcomes:
            if outcome.label == label:
                return outcome.probability
        return 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'gene': self.gene,
            'key': self.key,
            'inheritance': self.inheritance.value,
            'outcomes': [o.to_dict() for o in self.outcomes],
            'sire': self.sire_descriptor,
            'dam': self.dam_descriptor,
            'notes': self.notes,
        }


@dataclass
class CombinedOutcome:
    """
    여러 유전자를 동시에 고려한 결합 결과 한 줄
    - breakdown: (유전자, 라벨) 순서 목록
    - label: 'Normal'이 아닌 라벨을 ' + '로 연결 (모두 Normal이면 'Normal (all genes)')
    """
    breakdown: List[Tuple[str, str]]
    label: str
    probability: float
    key: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            'key': self.key,
            'label': self.label,
            'probability': self.probability,
            'breakdown': [{'gene': g, 'label': l} for g, l in self.breakdown],
        }


@dataclass
class OddsReport:
    """교배 확률 계산 결과 전체"""
    per_gene: List[GeneResult] = field(default_factory=list)
    combined: List[CombinedOutcome] = field(default_factory=list)
    folded_total: float = 1.0   # 잘라내기 전 결합 분포의 합

    @property
    def is_empty(self) -> bool:
        return not self.per_gene and not self.combined

    def get_gene(self, name: str) -> Optional[GeneResult]:
        """유전자 이름(대소문자 무시)으로 결과 조회"""
        target = " ".join(name.split()).lower()
        for result in self.per_gene:
            if result.key == target or result.gene.lower() == target:
                return result
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'per_gene': [r.to_dict() for r in self.per_gene],
            'combined': [c.to_dict() for c in self.combined],
        }


def format_probability_percent(value: float) -> str:
    """확률 -> 백분율 문자열 ('25%', '33.3%', '100%')"""
    if value is None or not math.isfinite(value) or value <= 0:
        return "0%"
    if value >= 0.9995:
        return "100%"
    rounded = round(value * 100, 1)
    if rounded == int(rounded):
        return f"{int(rounded)}%"
    return f"{rounded:.1f}%"
