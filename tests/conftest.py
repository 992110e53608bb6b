"""공통 테스트 픽스처"""

from typing import List, Tuple

import pytest

from morph_engine import (
    DescriptorClassifier,
    GeneDictionary,
    GeneticsEngine,
    MorphEngine,
    ProfileBuilder,
    TokenSegmenter,
    get_default_dictionary,
)
from morph_engine.models import GeneCategory, GeneResult, Outcome


@pytest.fixture
def dictionary() -> GeneDictionary:
    """기본 유전자 사전"""
    return get_default_dictionary()


@pytest.fixture
def segmenter(dictionary: GeneDictionary) -> TokenSegmenter:
    return TokenSegmenter(dictionary)


@pytest.fixture
def classifier(dictionary: GeneDictionary, segmenter: TokenSegmenter) -> DescriptorClassifier:
    return DescriptorClassifier(dictionary, segmenter)


@pytest.fixture
def builder(dictionary: GeneDictionary, classifier: DescriptorClassifier) -> ProfileBuilder:
    return ProfileBuilder(dictionary, classifier)


@pytest.fixture
def genetics(dictionary: GeneDictionary) -> GeneticsEngine:
    return GeneticsEngine(dictionary)


@pytest.fixture
def engine(dictionary: GeneDictionary) -> MorphEngine:
    return MorphEngine(dictionary=dictionary)


def make_result(gene: str, rows: List[Tuple[str, float]]) -> GeneResult:
    """직접 만든 유전자별 결과 (결합/검증 테스트용)"""
    return GeneResult(
        gene=gene,
        key=gene.lower(),
        inheritance=GeneCategory.INCOMPLETE_DOMINANT,
        outcomes=[Outcome(label, p) for label, p in rows],
    )
