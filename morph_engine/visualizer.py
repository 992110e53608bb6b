"""
visualizer.py - 교배 확률 차트 엔진
- 결합 결과: 가로 막대 차트
- 유전자별 결과: 누적 막대 차트
"""

import io
import base64
import numpy as np
from typing import List, Optional
from dataclasses import dataclass

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from .models import OddsReport, CombinedOutcome, GeneResult, format_probability_percent


# ============================================================
# 설정값
# ============================================================
@dataclass
class ChartConfig:
    # 캔버스
    fig_width: float = 10.0
    row_height: float = 0.45    # 막대 한 줄 높이 (인치)
    min_height: float = 3.0

    bar_height: float = 0.6
    edge_color: str = 'black'
    line_width: float = 0.8

    # 색상 팔레트
    color_bar: str = '#4C72B0'
    color_normal: str = '#D3D3D3'   # 'Normal' 결과
    palette: tuple = ('#4C72B0', '#DD8452', '#55A868', '#C44E52', '#8172B3', '#937860')

    font_size_label: int = 10
    font_size_title: int = 13
    dpi: int = 150


# ============================================================
# 시각화 엔진 메인
# ============================================================
class OddsVisualizer:
    def __init__(self, config: Optional[ChartConfig] = None):
        self.config = config or ChartConfig()

    def draw(self, report: OddsReport, title: str = "", save_path: Optional[str] = None) -> str:
        """결합 결과와 유전자별 결과를 한 장에 그려 Base64 PNG로 반환"""
        cfg = self.config
        combined_rows = max(len(report.combined), 1)
        gene_rows = max(len(report.per_gene), 1)
        height = max(cfg.min_height, (combined_rows + gene_rows) * cfg.row_height + 2.0)

        fig, (ax_combined, ax_genes) = plt.subplots(
            2, 1, figsize=(cfg.fig_width, height),
            gridspec_kw={'height_ratios': [combined_rows, gene_rows]}
        )

        # 1. 결합 결과
        self._draw_combined(ax_combined, report.combined)

        # 2. 유전자별 결과
        self._draw_genes(ax_genes, report.per_gene)

        if title:
            fig.suptitle(title, fontsize=cfg.font_size_title, fontweight='bold')

        plt.tight_layout()

        # 파일 저장
        if save_path:
            plt.savefig(save_path, dpi=cfg.dpi, bbox_inches='tight', facecolor='white')

        # 이미지 반환
        buf = io.BytesIO()
        plt.savefig(buf, format='png', dpi=cfg.dpi, bbox_inches='tight', facecolor='white')
        buf.seek(0)
        img_base64 = base64.b64encode(buf.read()).decode('utf-8')
        plt.close(fig)
        return img_base64

    # --------------------------------------------------------
    # [1] 결합 결과 (가로 막대)
    # --------------------------------------------------------
    def _draw_combined(self, ax, combined: List[CombinedOutcome]):
        cfg = self.config
        ax.set_title("Combined outcomes", fontsize=cfg.font_size_title)

        if not combined:
            self._draw_empty(ax)
            return

        # 확률 높은 것이 위로
        rows = list(reversed(combined))
        y = np.arange(len(rows))
        values = np.array([row.probability for row in rows]) * 100.0
        colors = [cfg.color_normal if not any(label != "Normal" for _, label in row.breakdown)
                  else cfg.color_bar for row in rows]

        ax.barh(y, values, height=cfg.bar_height, color=colors,
                edgecolor=cfg.edge_color, lw=cfg.line_width)
        ax.set_yticks(y)
        ax.set_yticklabels([row.label for row in rows], fontsize=cfg.font_size_label)
        ax.set_xlim(0, 100)
        ax.set_xlabel("Probability (%)")

        for yi, row in zip(y, rows):
            ax.text(row.probability * 100.0 + 1.0, yi, format_probability_percent(row.probability),
                    va='center', fontsize=cfg.font_size_label)

    # --------------------------------------------------------
    # [2] 유전자별 결과 (누적 막대)
    # --------------------------------------------------------
    def _draw_genes(self, ax, per_gene: List[GeneResult]):
        cfg = self.config
        ax.set_title("Per-gene outcomes", fontsize=cfg.font_size_title)

        if not per_gene:
            self._draw_empty(ax)
            return

        y = np.arange(len(per_gene))
        for yi, result in zip(y, per_gene):
            left = 0.0
            color_index = 0
            for outcome in result.outcomes:
                width = outcome.probability * 100.0
                if outcome.label == "Normal":
                    color = cfg.color_normal
                else:
                    color = cfg.palette[color_index % len(cfg.palette)]
                    color_index += 1
                ax.barh(yi, width, left=left, height=cfg.bar_height, color=color,
                        edgecolor=cfg.edge_color, lw=cfg.line_width)
                # 칸이 좁으면 라벨 생략
                if width >= 12.0:
                    ax.text(left + width / 2, yi,
                            f"{outcome.label}\n{format_probability_percent(outcome.probability)}",
                            ha='center', va='center', fontsize=cfg.font_size_label - 2)
                left += width

        ax.set_yticks(y)
        ax.set_yticklabels([f"{r.gene} ({r.inheritance.value})" for r in per_gene],
                           fontsize=cfg.font_size_label)
        ax.invert_yaxis()
        ax.set_xlim(0, 100)
        ax.set_xlabel("Probability (%)")

    def _draw_empty(self, ax):
        ax.text(0.5, 0.5, "No outcomes", ha='center', va='center',
                transform=ax.transAxes, fontsize=self.config.font_size_label)
        ax.axis('off')

    # --------------------------------------------------------
    # 유틸리티 메서드
    # --------------------------------------------------------
    def save_to_file(self, report: OddsReport, filepath: str, title: str = ""):
        """파일로 저장"""
        self.draw(report, title=title, save_path=filepath)

    def get_base64_image(self, report: OddsReport, title: str = "") -> str:
        """Base64 이미지 반환"""
        return self.draw(report, title=title)
