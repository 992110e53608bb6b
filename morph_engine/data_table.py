"""
data_table.py - 교배 확률 표 생성기
유전자별 / 결합 결과를 표시용·내보내기용 표 데이터로 변환
"""

from typing import List, Dict, Optional, Any
from dataclasses import dataclass, field

from .models import OddsReport, GeneResult, CombinedOutcome, format_probability_percent


@dataclass
class OddsTableConfig:
    """표 설정"""
    include_normal: bool = True        # 유전자별 표에 'Normal' 행 포함
    include_breakdown: bool = True     # 결합 표에 유전자별 세부 라벨 포함
    percent_column: str = "확률"
    outcome_column: str = "결과"


@dataclass
class OddsTableRow:
    """표의 한 행"""
    label: str
    probability: float
    group: str = ""        # 유전자 이름 (결합 표는 빈 문자열)
    details: str = ""

    @property
    def display(self) -> str:
        return format_probability_percent(self.probability)


@dataclass
class OddsTable:
    """교배 확률 표 전체"""
    rows: List[OddsTableRow] = field(default_factory=list)
    title: str = "교배 확률"
    notes: List[str] = field(default_factory=list)
    config: OddsTableConfig = field(default_factory=OddsTableConfig)

    def add_row(self, row: OddsTableRow):
        self.rows.append(row)

    def to_display_dict(self) -> List[Dict[str, Any]]:
        """표시용 데이터 반환 (백분율 문자열)"""
        result = []
        for row in self.rows:
            entry = {
                'gene': row.group,
                'label': row.label,
                'probability': row.display
            }
            if row.details:
                entry['details'] = row.details
            result.append(entry)
        return result

    def to_answer_dict(self) -> List[Dict[str, Any]]:
        """실제 값 데이터 반환 (0~1 실수)"""
        return [
            {'gene': row.group, 'label': row.label, 'probability': row.probability}
            for row in self.rows
        ]

    def to_markdown(self) -> str:
        """마크다운 표 형식으로 변환"""
        if not self.rows:
            return ""

        cfg = self.config
        with_gene = any(row.group for row in self.rows)
        with_details = any(row.details for row in self.rows)

        headers = []
        if with_gene:
            headers.append("유전자")
        headers.extend([cfg.outcome_column, cfg.percent_column])
        if with_details:
            headers.append("세부")

        header_line = "| " + " | ".join(headers) + " |"
        separator = "|" + "|".join(["---"] * len(headers)) + "|"

        data_lines = []
        for row in self.rows:
            cells = []
            if with_gene:
                cells.append(row.group)
            cells.extend([row.label, row.display])
            if with_details:
                cells.append(row.details)
            data_lines.append("| " + " | ".join(cells) + " |")

        lines = [header_line, separator] + data_lines
        if self.notes:
            lines.append("")
            lines.extend(f"- {note}" for note in self.notes)
        return "\n".join(lines)


class OddsTableGenerator:
    """
    교배 확률 표 생성기
    화면 표시, PDF/스프레드시트 내보내기용 표 데이터 생성
    """

    def __init__(self, config: Optional[OddsTableConfig] = None):
        self.config = config or OddsTableConfig()

    def generate_gene_table(self, results: List[GeneResult]) -> OddsTable:
        """유전자별 결과 표"""
        table = OddsTable(title="유전자별 확률", config=self.config)

        for result in results:
            for outcome in result.outcomes:
                if outcome.label == "Normal" and not self.config.include_normal:
                    continue
                table.add_row(OddsTableRow(
                    label=outcome.label,
                    probability=outcome.probability,
                    group=result.gene
                ))
            table.notes.append(f"{result.gene}: {result.notes}")

        return table

    def generate_combined_table(self, combined: List[CombinedOutcome]) -> OddsTable:
        """결합 결과 표"""
        table = OddsTable(title="결합 확률", config=self.config)

        for row in combined:
            details = ""
            if self.config.include_breakdown:
                details = ", ".join(
                    f"{gene}: {label}" for gene, label in row.breakdown
                    if label != "Normal"
                )
            table.add_row(OddsTableRow(
                label=row.label,
                probability=row.probability,
                details=details
            ))

        shown = sum(row.probability for row in combined)
        if combined and shown < 0.9995:
            table.notes.append(
                f"상위 {len(combined)}개 조합만 표시 (합계 {format_probability_percent(shown)})"
            )
        return table

    def create_report_data(self, report: OddsReport) -> Dict:
        """
        내보내기용 데이터 패키지 생성

        Returns:
            {
                'per_gene_display': 유전자별 표시용 표 데이터,
                'per_gene_answer': 유전자별 실제 값,
                'combined_display': 결합 표시용 표 데이터,
                'combined_answer': 결합 실제 값,
                'per_gene_markdown', 'combined_markdown': 마크다운 표
            }
        """
        gene_table = self.generate_gene_table(report.per_gene)
        combined_table = self.generate_combined_table(report.combined)

        return {
            'per_gene_display': gene_table.to_display_dict(),
            'per_gene_answer': gene_table.to_answer_dict(),
            'combined_display': combined_table.to_display_dict(),
            'combined_answer': combined_table.to_answer_dict(),
            'per_gene_markdown': gene_table.to_markdown(),
            'combined_markdown': combined_table.to_markdown(),
        }
