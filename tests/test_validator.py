"""논리 검증 테스트"""

from morph_engine import Animal, LogicValidator, MorphEngine, validate_logic
from morph_engine.models import CombinedOutcome, OddsReport
from morph_engine.validator import ValidationLevel

from conftest import make_result


class TestLogicValidator:
    """교배 확률 결과 검증"""

    def test_computed_report_is_valid(self, engine: MorphEngine) -> None:
        report = engine.compute_pairing_odds(
            Animal(morphs=["Pastel"], hets=["Clown"]), Animal(hets=["50% Clown"])
        )
        validation = LogicValidator().validate_logic(report)

        assert validation.is_valid
        assert validation.error_count == 0
        assert validation.warning_count == 0
        assert any(r.level == ValidationLevel.INFO for r in validation.results)

    def test_empty_report_is_valid(self) -> None:
        assert validate_logic(OddsReport()).is_valid

    def test_gene_sum_error(self) -> None:
        report = OddsReport(per_gene=[make_result("Pastel", [("Pastel", 0.5), ("Normal", 0.3)])])
        validation = validate_logic(report)

        assert not validation.is_valid
        assert validation.get_errors()[0].details["gene"] == "Pastel"

    def test_probability_range_error(self) -> None:
        report = OddsReport(per_gene=[make_result("Pastel", [("Pastel", 1.5), ("Normal", -0.5)])])
        validation = validate_logic(report)
        assert validation.error_count == 2

    def test_combined_over_one_is_error(self) -> None:
        rows = [
            CombinedOutcome(breakdown=[("Pastel", "Pastel")], label="Pastel", probability=0.7),
            CombinedOutcome(breakdown=[("Pastel", "Normal")], label="Normal (all genes)", probability=0.7),
        ]
        assert not validate_logic(OddsReport(combined=rows)).is_valid

    def test_pruned_fold_is_warning_only(self) -> None:
        rows = [CombinedOutcome(breakdown=[("Pastel", "Pastel")], label="Pastel", probability=0.5)]
        validation = validate_logic(OddsReport(combined=rows, folded_total=0.9))

        assert validation.is_valid
        assert validation.warning_count == 1
        assert validation.get_warnings()[0].details["folded_total"] == 0.9

    def test_report_rendering(self) -> None:
        validation = validate_logic(OddsReport(per_gene=[make_result("Pastel", [("Pastel", 1.0)])]))
        text = str(validation)
        assert "검증 보고서" in text
        assert "Pastel" in text
        data = validation.to_dict()
        assert data["is_valid"] is True
        assert data["results"][0]["level"] == "INFO"
