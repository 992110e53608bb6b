"""형질 문자열 분할기 테스트"""

import pytest

from morph_engine import CompactTiler, GeneDictionary, TokenSegmenter


class TestDelimitedSegments:
    """구분자 / 단어 단위 분할"""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Pastel Mojave Clown", ["Pastel", "Mojave", "Clown"]),
            ("Clown, Pastel, Het Hypo", ["Clown", "Pastel", "Het Hypo"]),
            ("Banana/Piebald", ["Banana", "Piebald"]),
            ("Pastel; Enchi | Spider + Pinstripe", ["Pastel", "Enchi", "Spider", "Pinstripe"]),
            ("Pastel\nClown", ["Pastel", "Clown"]),
            ("Yellow Belly Pastel", ["Yellow Belly", "Pastel"]),
            ("Super Pastel Mojave", ["Super Pastel", "Mojave"]),
            ("pastel CLOWN", ["Pastel", "Clown"]),
        ],
    )
    def test_segment(self, segmenter: TokenSegmenter, text, expected) -> None:
        assert segmenter.segment(text) == expected

    def test_empty_input(self, segmenter: TokenSegmenter) -> None:
        assert segmenter.segment("") == []
        assert segmenter.segment(None) == []
        assert segmenter.segment(" , ; ") == []

    def test_unknown_word_kept_literally(self, segmenter: TokenSegmenter) -> None:
        assert segmenter.segment("Pastel Zorblax") == ["Pastel", "Zorblax"]

    def test_super_without_gene_is_literal(self, segmenter: TokenSegmenter) -> None:
        assert segmenter.segment("Super") == ["Super"]


class TestHetPhrases:
    """het / 한정어 / 백분율 구문"""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Butter, 66% het Clown", ["Butter", "66% Het Clown"]),
            ("Butter possiable het Clown", ["Butter", "Possible Het Clown"]),
            ("Pastel het clown", ["Pastel", "Het Clown"]),
            ("Het Clown Pastel", ["Het Clown", "Pastel"]),
            ("Pastel 50% Clown", ["Pastel", "50% Het Clown"]),
            ("possible Clown", ["Possible Het Clown"]),
            ("ph Piebald", ["Possible Het Piebald"]),
            ("probable het Hypo", ["Probable Het Hypo"]),
            ("maybe het Hypo", ["Maybe Het Hypo"]),
        ],
    )
    def test_het_phrase(self, segmenter: TokenSegmenter, text, expected) -> None:
        assert segmenter.segment(text) == expected

    def test_gene_named_het_is_not_split(self, segmenter: TokenSegmenter) -> None:
        assert segmenter.segment("Het Daddy Pastel") == ["Het Daddy", "Pastel"]

    def test_het_phrase_with_unknown_gene(self, segmenter: TokenSegmenter) -> None:
        assert segmenter.segment("het Zorblax") == ["Het Zorblax"]


class TestCompactSegments:
    """붙여 쓴 문자열"""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("PastelMojaveClown", ["Pastel", "Mojave", "Clown"]),
            ("SuperPastelMojave", ["Super Pastel", "Mojave"]),
            ("PastelMojave50%hetClown", ["Pastel", "Mojave", "50% Het Clown"]),
            ("50%hetClownPastel", ["50% Het Clown", "Pastel"]),
        ],
    )
    def test_compact(self, segmenter: TokenSegmenter, text, expected) -> None:
        assert segmenter.segment(text) == expected

    def test_untileable_fragment_stays_literal(self, segmenter: TokenSegmenter) -> None:
        assert segmenter.segment("PastelXyzzy") == ["PastelXyzzy"]

    def test_every_concatenation_of_names_is_tiled(self, segmenter: TokenSegmenter) -> None:
        names = ["Pastel", "Mojave", "Clown", "Enchi", "Piebald"]
        for first in names:
            for second in names:
                if first == second:
                    continue
                assert segmenter.segment(first + second) == [first, second]

    def test_spans_do_not_overlap(self, segmenter: TokenSegmenter) -> None:
        spans = segmenter.segment_spans("PastelMojave50%hetClown Enchi")
        for left, right in zip(spans, spans[1:]):
            assert left.end <= right.start
        assert [s.token for s in spans] == ["Pastel", "Mojave", "50% Het Clown", "Enchi"]


class TestCompactTiler:
    """시작 위치별 분할 표"""

    def test_tile_returns_compact_keys_and_names(self, dictionary: GeneDictionary) -> None:
        tiler = CompactTiler(dictionary)
        assert tiler.tile("pastelmojave") == [("pastel", "Pastel"), ("mojave", "Mojave")]

    def test_tile_fails_without_full_cover(self, dictionary: GeneDictionary) -> None:
        assert CompactTiler(dictionary).tile("pastelxy") is None
        assert CompactTiler(dictionary).tile("") is None

    def test_prefers_fewest_tokens(self) -> None:
        custom = GeneDictionary({"Recessive": ["Ab", "Cd", "Abcd"]})
        tiler = CompactTiler(custom)
        assert tiler.tile("abcd") == [("abcd", "Abcd")]
        assert tiler.tile("abcdab") == [("abcd", "Abcd"), ("ab", "Ab")]

    def test_table_cells_hold_one_minimal_tiling(self) -> None:
        custom = GeneDictionary({"Recessive": ["Ab", "Cd", "Abcd"]})
        table = CompactTiler(custom).build_table("abcd")
        assert table[0] == (1, 4, "Abcd")
        assert table[2] == (1, 4, "Cd")
        assert table[1] is None
        assert table[4] == (0, 4, "")

    def test_long_ambiguous_repeat_keeps_longest_prefix(self) -> None:
        # 'abcd'는 Ab+Cd, Abc+D 두 가지로 같은 토큰 수로 나뉜다
        custom = GeneDictionary({"Recessive": ["Ab", "Cd", "Abc", "D"]})
        tiles = CompactTiler(custom).tile("Abcd" * 200)

        assert len(tiles) == 400
        assert tiles[:4] == [("abc", "Abc"), ("d", "D"), ("abc", "Abc"), ("d", "D")]

    def test_long_compact_input_segments(self, segmenter: TokenSegmenter, dictionary: GeneDictionary) -> None:
        tokens = segmenter.segment("DesertGhostVesper" * 18)
        assert len(tokens) >= 18
        assert all(dictionary.lookup_canonical(token) == token for token in tokens)
