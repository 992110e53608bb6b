"""
engine.py - 유전 엔진 진입점
사전 하나를 주입받아 분할 -> 분류 -> 집계 -> 계산 -> 결합 단계를 묶는다
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .classifier import DescriptorClassifier
from .combiner import CombinerConfig, OutcomeCombiner
from .gene_library import GeneDictionary, get_default_dictionary
from .genetics import GeneticsEngine, InheritanceConfig
from .models import Animal, ClassifiedTokens, OddsReport
from .profile import GeneProfile, ProfileBuilder
from .segmenter import TokenSegmenter

logger = logging.getLogger(__name__)


AnimalLike = Union[Animal, Mapping[str, Any]]


class MorphEngine:
    """
    유전 엔진

    사용법:
        engine = MorphEngine()
        traits = engine.split_input("Pastel Mojave 50% het Clown")
        report = engine.compute_pairing_odds(male, female)
    """

    def __init__(
        self,
        dictionary: Optional[GeneDictionary] = None,
        inheritance_config: Optional[InheritanceConfig] = None,
        combiner_config: Optional[CombinerConfig] = None
    ):
        self.dictionary = dictionary or get_default_dictionary()
        self.segmenter = TokenSegmenter(self.dictionary)
        self.classifier = DescriptorClassifier(self.dictionary, self.segmenter)
        self.profile_builder = ProfileBuilder(self.dictionary, self.classifier)
        self.genetics = GeneticsEngine(self.dictionary, inheritance_config)
        self.combiner = OutcomeCombiner(combiner_config)

    def segment(self, text) -> List[str]:
        return self.segmenter.segment(text)

    def classify(self, tokens: Iterable[str]) -> ClassifiedTokens:
        return self.classifier.classify(tokens)

    def split_input(self, text) -> ClassifiedTokens:
        return self.classifier.split_input(text)

    def format_tokens(self, visual: Iterable[str], het: Iterable[str]) -> str:
        return self.classifier.format_tokens(visual, het)

    def build_profile(self, animal: Optional[AnimalLike]) -> GeneProfile:
        return self.profile_builder.build_profile(animal)

    def compute_odds(self, male_profile: GeneProfile, female_profile: GeneProfile) -> OddsReport:
        """두 부모 프로필 -> 유전자별 결과 + 결합 결과"""
        per_gene = self.genetics.calculate(male_profile, female_profile)
        folded = self.combiner.fold(per_gene)
        combined = self.combiner.select(folded)
        report = OddsReport(
            per_gene=per_gene,
            combined=combined,
            folded_total=sum(c.probability for c in folded) if folded else 1.0,
        )
        logger.debug(
            "Computed odds: %d genes, %d combined rows",
            len(report.per_gene), len(report.combined)
        )
        return report

    def compute_pairing_odds(
        self,
        male: Optional[AnimalLike],
        female: Optional[AnimalLike]
    ) -> OddsReport:
        """두 개체 레코드 -> 교배 확률 (한쪽이라도 없으면 빈 결과)"""
        if male is None or female is None:
            return OddsReport()
        return self.compute_odds(self.build_profile(male), self.build_profile(female))

    def animal_from_text(self, text: str, sex: str = "F", name: str = "") -> Animal:
        """자유 입력 문자열로 개체 생성 (CLI / API 편의용)"""
        traits = self.split_input(text)
        return Animal(id=name, name=name, sex=sex, morphs=traits.visual, hets=traits.het)

    @staticmethod
    def to_dict(report: OddsReport) -> Dict[str, Any]:
        """JSON 내보내기용"""
        data = report.to_dict()
        data['folded_total'] = report.folded_total
        return data
