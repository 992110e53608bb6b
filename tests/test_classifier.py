"""토큰 분류기 테스트"""

import math

import pytest

from morph_engine import DescriptorClassifier, TokenSegmenter
from morph_engine.classifier import parse_percent, title_case_gene, unique_gene_tokens
from morph_engine.models import GeneCategory, TokenKind


class TestHetDetection:
    """보인자 판정"""

    @pytest.mark.parametrize(
        "token",
        ["Het Clown", "het clown", "66% Het Clown", "50% Clown", "possible Clown",
         "ph Clown", "Probable Het Hypo", "maybe Hypo"],
    )
    def test_het_descriptors(self, classifier: DescriptorClassifier, token) -> None:
        assert classifier.is_het_descriptor(token)

    @pytest.mark.parametrize("token", ["Clown", "Super Pastel", "Het Daddy", "Phantom", ""])
    def test_visual_descriptors(self, classifier: DescriptorClassifier, token) -> None:
        assert not classifier.is_het_descriptor(token)


class TestParseHet:
    """보인자 확률 / 형식"""

    @pytest.mark.parametrize(
        "token, probability, record",
        [
            ("Het Clown", 1.0, "Clown"),
            ("66% het Clown", 0.66, "66% Clown"),
            ("possible het Clown", 0.5, "Possible Clown"),
            ("possiable het Clown", 0.5, "Possible Clown"),
            ("ph Clown", 0.5, "Possible Clown"),
            ("probable het Clown", 0.66, "Probable Clown"),
            ("maybe het Clown", 0.33, "Maybe Clown"),
            ("Possible Clown", 0.5, "Possible Clown"),
        ],
    )
    def test_probability_and_record_form(
        self, classifier: DescriptorClassifier, token, probability, record
    ) -> None:
        parsed = classifier.parse_het(token)
        assert parsed.kind == TokenKind.HET
        assert parsed.probability == pytest.approx(probability)
        assert parsed.record_form == record

    def test_percentage_beats_qualifier(self, classifier: DescriptorClassifier) -> None:
        parsed = classifier.parse_het("66% possible het Clown")
        assert parsed.probability == pytest.approx(0.66)
        assert parsed.display_form == "66% Possible Het Clown"

    def test_percentage_is_clamped(self, classifier: DescriptorClassifier) -> None:
        parsed = classifier.parse_het("150% het Clown")
        assert parsed.probability == 1.0
        assert parsed.percent is None
        assert parsed.record_form == "Clown"
        assert parsed.display_form == "Het Clown"

    def test_full_percentage_is_kept(self, classifier: DescriptorClassifier) -> None:
        assert classifier.parse_het("100% het Clown").record_form == "100% Clown"

    def test_unknown_gene_is_title_cased(self, classifier: DescriptorClassifier) -> None:
        assert classifier.parse_het("het mystery gene").canonical_gene == "Mystery Gene"

    def test_bare_marker_is_dropped(self, classifier: DescriptorClassifier) -> None:
        assert classifier.parse_het("het") is None
        assert classifier.parse_het("50% possible") is None
        assert classifier.parse_het("") is None


class TestParseVisual:
    """발현 형질 / 슈퍼 형태"""

    @pytest.mark.parametrize("token", ["Super Pastel", "super pastel", "SuperPastel", "Super-Pastel"])
    def test_super_forms(self, classifier: DescriptorClassifier, token) -> None:
        parsed = classifier.parse_visual(token)
        assert parsed.is_super
        assert parsed.canonical_gene == "Pastel"
        assert parsed.record_form == "Super Pastel"

    def test_gene_named_het_is_visual(self, classifier: DescriptorClassifier) -> None:
        parsed = classifier.parse_token("Het Daddy")
        assert parsed.kind == TokenKind.VISUAL
        assert parsed.canonical_gene == "Het Daddy"

    def test_unknown_visual_kept_as_is(self, classifier: DescriptorClassifier) -> None:
        assert classifier.parse_visual("Zorblax").record_form == "Zorblax"


class TestClassify:
    """목록 분류 / 원문 파싱"""

    def test_classify_tokens(self, classifier: DescriptorClassifier) -> None:
        result = classifier.classify(["Pastel", "Het Clown", "Super Mojave", "50% Het Hypo"])
        assert result.visual == ["Pastel", "Super Mojave"]
        assert result.het == ["Clown", "50% Hypo"]

    def test_classify_skips_empty_tokens(self, classifier: DescriptorClassifier) -> None:
        result = classifier.classify(["", "  ", "Pastel"])
        assert result.to_dict() == {"visual": ["Pastel"], "het": []}

    @pytest.mark.parametrize(
        "text, visual, het",
        [
            ("Pastel Mojave Clown", ["Pastel", "Mojave", "Clown"], []),
            ("PastelMojaveClown", ["Pastel", "Mojave", "Clown"], []),
            ("SuperPastelMojave", ["Super Pastel", "Mojave"], []),
            ("PastelMojave50%hetClown", ["Pastel", "Mojave"], ["50% Clown"]),
            ("Butter, 66% het Clown", ["Butter"], ["66% Clown"]),
            ("Butter possiable het Clown", ["Butter"], ["Possible Clown"]),
            ("Clown, Pastel, Het Hypo", ["Clown", "Pastel"], ["Hypo"]),
        ],
    )
    def test_split_input(self, classifier: DescriptorClassifier, text, visual, het) -> None:
        result = classifier.split_input(text)
        assert result.visual == visual
        assert result.het == het

    def test_round_trip_every_dictionary_gene(self, classifier: DescriptorClassifier, segmenter: TokenSegmenter) -> None:
        failures = []
        for entry in classifier.dictionary:
            name = entry.canonical_name
            visual = [name, f"Super {name}"]
            het = [name] if entry.category == GeneCategory.RECESSIVE else []
            result = classifier.classify(segmenter.segment(classifier.format_tokens(visual, het)))
            if result.visual != visual or result.het != het:
                failures.append((name, result.visual, result.het))
        assert failures == []

    def test_super_gene_named_het_stays_visual(self, classifier: DescriptorClassifier) -> None:
        assert not classifier.is_het_descriptor("Super Het Red Axanthic")
        result = classifier.split_input("Super Het Daddy")
        assert result.visual == ["Super Het Daddy"]
        assert result.het == []

    def test_certain_het_probability(self, classifier: DescriptorClassifier) -> None:
        result = classifier.split_input("Clown, Pastel, Het Hypo")
        assert classifier.parse_het(result.het[0]).probability == 1.0


class TestFormatting:
    """편집용 / 표시용 문자열"""

    def test_format_tokens(self, classifier: DescriptorClassifier) -> None:
        assert classifier.format_tokens(["Clown", "Pastel"], ["Hypo"]) == "Clown, Pastel, Het Hypo"
        assert classifier.format_tokens([], ["50% Clown", "Possible Hypo"]) == \
            "50% Het Clown, Possible Het Hypo"

    def test_format_het_for_display(self, classifier: DescriptorClassifier) -> None:
        assert classifier.format_het_for_display("Probable Clown") == "Probable Het Clown"
        assert classifier.format_het_for_display("") is None

    def test_round_trip(self, classifier: DescriptorClassifier, segmenter: TokenSegmenter) -> None:
        visual = ["Pastel", "Super Mojave", "Yellow Belly"]
        het = ["Clown", "50% Hypo", "Possible Piebald", "Maybe Lavender Albino"]
        text = classifier.format_tokens(visual, het)
        result = classifier.classify(segmenter.segment(text))
        assert result.visual == visual
        assert result.het == het

    def test_display_tokens_sorted_by_category(self, classifier: DescriptorClassifier) -> None:
        tokens = classifier.display_tokens(["Clown", "Pastel", "Pinstripe", "clown", "Zorblax"], ["Hypo"])
        assert tokens == ["Pinstripe", "Pastel", "Clown", "Het Hypo", "Zorblax"]

    def test_display_tokens_stable_within_category(self, classifier: DescriptorClassifier) -> None:
        assert classifier.display_tokens(["Mojave", "Enchi", "Pastel"], []) == ["Mojave", "Enchi", "Pastel"]


class TestHelpers:
    """보조 함수"""

    @pytest.mark.parametrize(
        "raw, expected",
        [(50, 0.5), ("66", 0.66), (-5, 0.0), (150, 1.0), (0, 0.0)],
    )
    def test_parse_percent(self, raw, expected) -> None:
        assert parse_percent(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", [math.inf, math.nan, "abc", None])
    def test_parse_percent_invalid(self, raw) -> None:
        assert parse_percent(raw) is None

    def test_title_case_gene(self) -> None:
        assert title_case_gene("mystery gene x") == "Mystery Gene X"
        assert title_case_gene("EMG thing") == "EMG Thing"

    def test_unique_gene_tokens_is_idempotent(self) -> None:
        tokens = ["Pastel", "pastel", " Pastel ", "Clown", "CLOWN", "Het  Hypo", "het hypo"]
        once = unique_gene_tokens(tokens)
        assert once == ["Pastel", "Clown", "Het  Hypo"]
        assert unique_gene_tokens(once) == once
