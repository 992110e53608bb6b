"""결합 결과 테스트"""

import pytest

from morph_engine import CombinerConfig, OutcomeCombiner
from morph_engine.combiner import ALL_NORMAL_LABEL

from conftest import make_result


@pytest.fixture
def combiner() -> OutcomeCombiner:
    return OutcomeCombiner()


class TestCombine:
    """결합 분포"""

    def test_two_independent_genes(self, combiner: OutcomeCombiner) -> None:
        per_gene = [
            make_result("Enchi", [("Enchi", 0.5), ("Normal", 0.5)]),
            make_result("Pastel", [("Pastel", 0.5), ("Normal", 0.5)]),
        ]
        rows = combiner.combine(per_gene)

        assert len(rows) == 4
        assert all(row.probability == pytest.approx(0.25) for row in rows)
        assert {row.label for row in rows} == {
            "Enchi + Pastel", "Enchi", "Pastel", ALL_NORMAL_LABEL,
        }

    def test_breakdown_and_key(self, combiner: OutcomeCombiner) -> None:
        per_gene = [
            make_result("Clown", [("Het Clown", 1.0)]),
            make_result("Pastel", [("Pastel", 0.5), ("Normal", 0.5)]),
        ]
        top = combiner.combine(per_gene)[0]
        assert top.breakdown == [("Clown", "Het Clown"), ("Pastel", "Pastel")] or \
            top.breakdown == [("Clown", "Het Clown"), ("Pastel", "Normal")]
        assert top.key == "|".join(f"{g}:{l}" for g, l in top.breakdown)

    def test_all_normal_label(self, combiner: OutcomeCombiner) -> None:
        rows = combiner.combine([make_result("Pastel", [("Normal", 1.0)])])
        assert rows[0].label == ALL_NORMAL_LABEL

    def test_empty_input(self, combiner: OutcomeCombiner) -> None:
        assert combiner.fold([]) == []
        assert combiner.combine([]) == []

    def test_rows_sorted_and_limited(self, combiner: OutcomeCombiner) -> None:
        per_gene = [
            make_result(gene, [("Super " + gene, 0.25), (gene, 0.5), ("Normal", 0.25)])
            for gene in ("Enchi", "Mojave", "Pastel")
        ]
        folded = combiner.fold(per_gene)
        rows = combiner.combine(per_gene)

        assert len(folded) == 27
        assert sum(c.probability for c in folded) == pytest.approx(1.0)
        assert len(rows) == 12
        probabilities = [r.probability for r in rows]
        assert probabilities == sorted(probabilities, reverse=True)
        assert sum(probabilities) <= 1.0 + 1e-9
        assert rows[0].label == "Enchi + Mojave + Pastel"
        assert rows[0].probability == pytest.approx(0.125)


class TestCombinerConfig:
    """단계별 상한 / 반환 개수 설정"""

    def test_per_step_cap(self) -> None:
        combiner = OutcomeCombiner(CombinerConfig(max_combos=2))
        per_gene = [
            make_result("Enchi", [("Enchi", 0.6), ("Normal", 0.4)]),
            make_result("Pastel", [("Pastel", 0.7), ("Normal", 0.3)]),
        ]
        folded = combiner.fold(per_gene)
        assert len(folded) == 2
        assert folded[0].probability == pytest.approx(0.42)
        assert folded[1].probability == pytest.approx(0.28)
        assert sum(c.probability for c in folded) < 1.0

    def test_limit(self) -> None:
        combiner = OutcomeCombiner(CombinerConfig(limit=3))
        per_gene = [
            make_result("Enchi", [("Enchi", 0.5), ("Normal", 0.5)]),
            make_result("Pastel", [("Pastel", 0.5), ("Normal", 0.5)]),
        ]
        assert len(combiner.combine(per_gene)) == 3

    def test_missing_outcomes_count_as_normal(self, combiner: OutcomeCombiner) -> None:
        rows = combiner.combine([make_result("Pastel", [])])
        assert rows[0].label == ALL_NORMAL_LABEL
        assert rows[0].probability == pytest.approx(1.0)
