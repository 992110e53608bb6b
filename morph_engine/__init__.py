"""
Morph Engine - 파충류 모프 유전 계산기

자유 입력 형질 문자열을 정규화하고 교배 쌍의 멘델 유전 확률을 계산하는 엔진
"""

from .models import (
    GeneCategory,
    TokenKind,
    DictionaryEntry,
    GeneToken,
    ClassifiedTokens,
    Animal,
    GeneProfileEntry,
    Outcome,
    GeneResult,
    CombinedOutcome,
    OddsReport,
    format_probability_percent
)

from .gene_library import (
    GeneDictionary,
    get_default_dictionary,
    normalize_key,
    compact_key
)

from .segmenter import (
    CompactTiler,
    TokenSegmenter
)

from .classifier import (
    DescriptorClassifier
)

from .profile import (
    ProfileBuilder
)

from .genetics import (
    InheritanceConfig,
    GeneticsEngine
)

from .combiner import (
    CombinerConfig,
    OutcomeCombiner
)

from .engine import (
    MorphEngine
)

from .visualizer import (
    ChartConfig,
    OddsVisualizer,
)

from .validator import (
    LogicValidator,
    validate_logic
)

from .data_table import (
    OddsTableConfig,
    OddsTableGenerator
)


__version__ = "1.0.0"
__all__ = [
    # Models
    "GeneCategory",
    "TokenKind",
    "DictionaryEntry",
    "GeneToken",
    "ClassifiedTokens",
    "Animal",
    "GeneProfileEntry",
    "Outcome",
    "GeneResult",
    "CombinedOutcome",
    "OddsReport",
    "format_probability_percent",

    # Dictionary
    "GeneDictionary",
    "get_default_dictionary",
    "normalize_key",
    "compact_key",

    # Parsing
    "CompactTiler",
    "TokenSegmenter",
    "DescriptorClassifier",
    "ProfileBuilder",

    # Genetics
    "InheritanceConfig",
    "GeneticsEngine",
    "CombinerConfig",
    "OutcomeCombiner",
    "MorphEngine",

    # Visualizer
    "ChartConfig",
    "OddsVisualizer",

    # Validator
    "LogicValidator",
    "validate_logic",

    # Data Table
    "OddsTableConfig",
    "OddsTableGenerator",
]
