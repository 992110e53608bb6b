"""
validator.py - 논리 검증 모듈
계산된 교배 확률 결과의 정합성 검증 (확률 범위, 분포 합)
"""

from typing import List, Dict
from dataclasses import dataclass, field
from enum import Enum

from .models import OddsReport, GeneResult, CombinedOutcome


TOLERANCE = 1e-6


class ValidationLevel(Enum):
    """검증 레벨"""
    ERROR = "ERROR"      # 치명적 오류 (확률 불변식 위반)
    WARNING = "WARNING"  # 경고 (잘라낸 결과 등)
    INFO = "INFO"        # 정보


@dataclass
class ValidationResult:
    """검증 결과"""
    is_valid: bool
    level: ValidationLevel
    message: str
    details: Dict = field(default_factory=dict)

    def __str__(self):
        return f"[{self.level.value}] {self.message}"


@dataclass
class ValidationReport:
    """전체 검증 보고서"""
    results: List[ValidationResult] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """에러가 없으면 유효"""
        return not any(
            r.level == ValidationLevel.ERROR and not r.is_valid
            for r in self.results
        )

    @property
    def error_count(self) -> int:
        return sum(1 for r in self.results
                   if r.level == ValidationLevel.ERROR and not r.is_valid)

    @property
    def warning_count(self) -> int:
        return sum(1 for r in self.results
                   if r.level == ValidationLevel.WARNING and not r.is_valid)

    def add_result(self, result: ValidationResult):
        self.results.append(result)

    def get_errors(self) -> List[ValidationResult]:
        return [r for r in self.results
                if r.level == ValidationLevel.ERROR and not r.is_valid]

    def get_warnings(self) -> List[ValidationResult]:
        return [r for r in self.results
                if r.level == ValidationLevel.WARNING and not r.is_valid]

    def to_dict(self) -> Dict:
        return {
            'is_valid': self.is_valid,
            'error_count': self.error_count,
            'warning_count': self.warning_count,
            'results': [
                {
                    'valid': r.is_valid,
                    'level': r.level.value,
                    'message': r.message,
                    'details': r.details
                }
                for r in self.results
            ]
        }

    def __str__(self):
        lines = [
            "=== 검증 보고서 ===",
            f"전체 결과: {'✓ 유효' if self.is_valid else '✗ 무효'}",
            f"오류: {self.error_count}, 경고: {self.warning_count}",
            ""
        ]

        if self.results:
            lines.append("상세 결과:")
            for r in self.results:
                status = "✓" if r.is_valid else "✗"
                lines.append(f"  {status} [{r.level.value}] {r.message}")

        return "\n".join(lines)


class LogicValidator:
    """
    교배 확률 논리 검증 클래스

    검증 항목:
    1. 모든 확률이 [0, 1] 범위
    2. 유전자별 결과 합 = 1
    3. 잘라내기 전 결합 분포 합 = 1, 반환된 결합 결과 합 <= 1
    """

    def validate_logic(self, report: OddsReport) -> ValidationReport:
        """
        전체 논리 검증 수행

        Args:
            report: 검증할 교배 확률 결과

        Returns:
            ValidationReport 객체
        """
        validation = ValidationReport()

        # 1. 유전자별 검증
        for gene_result in report.per_gene:
            for r in self._validate_gene(gene_result):
                validation.add_result(r)

        # 2. 결합 결과 검증
        for r in self._validate_combined(report.combined, report.folded_total):
            validation.add_result(r)

        return validation

    def _validate_gene(self, result: GeneResult) -> List[ValidationResult]:
        """유전자 하나의 결과 분포 검증"""
        results = []

        for outcome in result.outcomes:
            if not (0.0 <= outcome.probability <= 1.0 + TOLERANCE):
                results.append(ValidationResult(
                    is_valid=False,
                    level=ValidationLevel.ERROR,
                    message=f"{result.gene}: '{outcome.label}' 확률이 범위를 벗어남 ({outcome.probability})",
                    details={'gene': result.gene, 'label': outcome.label,
                             'probability': outcome.probability}
                ))

        total = result.total_probability
        if abs(total - 1.0) > TOLERANCE:
            results.append(ValidationResult(
                is_valid=False,
                level=ValidationLevel.ERROR,
                message=f"{result.gene}: 결과 확률의 합이 1이 아님 ({total:.8f})",
                details={'gene': result.gene, 'total': total}
            ))
        else:
            results.append(ValidationResult(
                is_valid=True,
                level=ValidationLevel.INFO,
                message=f"{result.gene}: 결과 분포 정상 ({result.inheritance.value})",
                details={'gene': result.gene, 'total': total}
            ))

        return results

    def _validate_combined(
        self,
        combined: List[CombinedOutcome],
        folded_total: float
    ) -> List[ValidationResult]:
        """결합 결과 검증"""
        results = []

        for row in combined:
            if not (0.0 <= row.probability <= 1.0 + TOLERANCE):
                results.append(ValidationResult(
                    is_valid=False,
                    level=ValidationLevel.ERROR,
                    message=f"결합 결과 '{row.label}' 확률이 범위를 벗어남 ({row.probability})",
                    details={'label': row.label, 'probability': row.probability}
                ))

        if combined and abs(folded_total - 1.0) > TOLERANCE:
            # 단계별 상한으로 일부 조합이 잘려 나간 경우
            results.append(ValidationResult(
                is_valid=False,
                level=ValidationLevel.WARNING,
                message=f"잘라내기 전 결합 분포의 합이 1이 아님 ({folded_total:.8f})",
                details={'folded_total': folded_total}
            ))

        shown = sum(row.probability for row in combined)
        if shown > 1.0 + TOLERANCE:
            results.append(ValidationResult(
                is_valid=False,
                level=ValidationLevel.ERROR,
                message=f"결합 결과 확률의 합이 1을 초과함 ({shown:.8f})",
                details={'total': shown}
            ))
        elif combined:
            results.append(ValidationResult(
                is_valid=True,
                level=ValidationLevel.INFO,
                message=f"결합 결과 {len(combined)}개, 표시된 확률 합 {shown:.4f}",
                details={'total': shown, 'rows': len(combined)}
            ))

        return results


def validate_logic(report: OddsReport) -> ValidationReport:
    """
    편의 함수: 교배 확률 논리 검증 수행

    Args:
        report: 검증할 교배 확률 결과

    Returns:
        ValidationReport 객체
    """
    validator = LogicValidator()
    return validator.validate_logic(report)
