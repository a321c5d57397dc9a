# -*- coding: utf-8 -*-
"""
Visualization Module
====================

Charts for branch rankings and weight sensitivity.
"""

import numpy as np
from typing import Dict, Optional, Tuple
from pathlib import Path

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt

from .config import Category, CategoryThresholds
from .ranking.results import AnalysisResult


class RankingVisualizer:
    """Saves ranking charts as PNG files."""

    CATEGORY_COLORS = {
        Category.EXCELLENT: '#2E7D32',
        Category.GOOD: '#1976D2',
        Category.NEEDS_IMPROVEMENT: '#C73E1D',
    }

    def __init__(self,
                 output_dir: str = 'outputs/figures',
                 figsize: Tuple[int, int] = (12, 8),
                 dpi: int = 150):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.figsize = figsize
        self.dpi = dpi

    def _save(self, fig, save_name: str) -> str:
        plt.tight_layout()
        save_path = self.output_dir / save_name
        fig.savefig(save_path, dpi=self.dpi, bbox_inches='tight',
                    facecolor='white', edgecolor='none')
        plt.close(fig)
        return str(save_path)

    def plot_topsis_scores(self,
                           result: AnalysisResult,
                           thresholds: CategoryThresholds = CategoryThresholds(),
                           title: str = 'Branch Performance (TOPSIS)',
                           save_name: str = 'topsis_scores.png') -> Optional[str]:
        """
        Horizontal bar chart of scores, best branch on top, colored by
        category with the category thresholds marked.
        """
        if not result.success:
            return None

        branches = list(result.ranked_branches)
        height = max(3.0, 0.45 * len(branches) + 1.5)
        fig, ax = plt.subplots(figsize=(self.figsize[0], height))

        scores = [b.topsis_score for b in branches]
        colors = [self.CATEGORY_COLORS[b.category] for b in branches]
        bars = ax.barh(range(len(branches)), scores, color=colors)

        ax.set_yticks(range(len(branches)))
        ax.set_yticklabels([f"{b.rank}. {b.branch_name[:30]}" for b in branches], fontsize=10)
        ax.invert_yaxis()

        for value, label in [(thresholds.good, 'Good'), (thresholds.excellent, 'Excellent')]:
            ax.axvline(value, color='#616161', linestyle='--', linewidth=1)
            ax.text(value, -0.7, label, ha='center', fontsize=9, color='#616161')

        for bar, b in zip(bars, branches):
            ax.text(bar.get_width() + 0.01, bar.get_y() + bar.get_height() / 2,
                    f'{b.score_percentage}%', va='center', fontsize=9)

        ax.set_xlim(0, 1.1)
        ax.set_xlabel('TOPSIS Score', fontsize=11)
        ax.set_title(title, fontsize=13, fontweight='bold')
        ax.grid(True, alpha=0.3, axis='x')

        return self._save(fig, save_name)

    def plot_weight_sensitivity(self,
                                weight_sensitivity: Dict[str, float],
                                title: str = 'Weight Sensitivity Analysis',
                                save_name: str = 'weight_sensitivity.png') -> Optional[str]:
        """Plot weight sensitivity bar chart."""
        if not weight_sensitivity:
            return None

        fig, ax = plt.subplots(figsize=(self.figsize[0], self.figsize[1] * 0.6))

        criteria = list(weight_sensitivity.keys())
        sensitivities = list(weight_sensitivity.values())

        sorted_idx = np.argsort(sensitivities)[::-1]
        criteria = [criteria[i] for i in sorted_idx]
        sensitivities = [sensitivities[i] for i in sorted_idx]

        colors = [plt.cm.RdYlGn_r(s) for s in sensitivities]
        bars = ax.barh(range(len(criteria)), sensitivities, color=colors)

        ax.set_yticks(range(len(criteria)))
        ax.set_yticklabels([c[:25] for c in criteria], fontsize=10)
        ax.set_xlabel('Sensitivity Index', fontsize=11)
        ax.set_title(title, fontsize=13, fontweight='bold')
        ax.invert_yaxis()

        for bar, val in zip(bars, sensitivities):
            ax.text(val + 0.01, bar.get_y() + bar.get_height() / 2,
                    f'{val:.3f}', va='center', fontsize=9)

        ax.set_xlim(0, max(max(sensitivities), 0.1) * 1.15)
        ax.grid(True, alpha=0.3, axis='x')

        return self._save(fig, save_name)


def create_visualizer(output_dir: str = 'outputs/figures') -> RankingVisualizer:
    """Factory function for RankingVisualizer."""
    return RankingVisualizer(output_dir)
