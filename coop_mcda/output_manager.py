# -*- coding: utf-8 -*-
"""
Output Management for Branch Ranking Results
============================================

Persists analysis artefacts into an organised directory structure::

    outputs/
    ├── results/   — numerical data  (CSV, JSON)
    ├── figures/   — charts  (PNG)
    └── reports/   — plain text report
"""

import json
import pandas as pd
from pathlib import Path
from typing import Dict, Optional
from datetime import datetime

from .analysis.sensitivity import SensitivityResult
from .logger import get_logger
from .ranking.results import AnalysisResult


class OutputManager:
    """Manages structured output to ``results/``, ``figures/``, ``reports/``."""

    def __init__(self, base_output_dir: str = 'outputs'):
        self.base_dir = Path(base_output_dir)
        self.results_dir = self.base_dir / 'results'
        self.figures_dir = self.base_dir / 'figures'
        self.reports_dir = self.base_dir / 'reports'
        self._setup_directories()
        self.logger = get_logger()

    def _setup_directories(self) -> None:
        for d in [self.results_dir, self.figures_dir, self.reports_dir]:
            d.mkdir(parents=True, exist_ok=True)

    # -----------------------------------------------------------------
    # Ranking export
    # -----------------------------------------------------------------

    def save_rankings(self, result: AnalysisResult) -> str:
        """Save the ranked branches to CSV."""
        path = self.results_dir / 'rankings.csv'
        result.to_frame().to_csv(path, float_format='%.6f')
        return str(path)

    def save_analysis_json(self, result: AnalysisResult) -> str:
        """Save the full analysis in its camelCase wire shape."""
        path = self.results_dir / 'analysis.json'
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(result.to_dict(), f, indent=2, ensure_ascii=False, default=str)
        return str(path)

    def save_branch_recommendations(self, result: AnalysisResult) -> str:
        """One row per branch with its priority and advice bullets."""
        rows = [{
            'branch_id': r.branch_id,
            'branch_name': r.branch_name,
            'score': r.score,
            'category': r.category.value,
            'priority': r.priority,
            'recommendations': ' | '.join(r.recommendations),
        } for r in result.recommendations.branch_level]
        path = self.results_dir / 'branch_recommendations.csv'
        pd.DataFrame(rows, columns=['branch_id', 'branch_name', 'score', 'category',
                                    'priority', 'recommendations']
                     ).to_csv(path, index=False, float_format='%.6f')
        return str(path)

    def save_sensitivity(self, sensitivity: SensitivityResult) -> str:
        path = self.results_dir / 'sensitivity.csv'
        sensitivity.stability_frame().to_csv(path, float_format='%.6f')
        return str(path)

    # -----------------------------------------------------------------
    # Text report
    # -----------------------------------------------------------------

    def save_report(self,
                    result: AnalysisResult,
                    sensitivity: Optional[SensitivityResult] = None) -> str:
        """Write a plain text report of the analysis."""
        path = self.reports_dir / 'report.txt'
        path.write_text(self.build_report(result, sensitivity), encoding='utf-8')
        return str(path)

    def build_report(self,
                     result: AnalysisResult,
                     sensitivity: Optional[SensitivityResult] = None) -> str:
        lines = [
            "=" * 70,
            "BRANCH PERFORMANCE ANALYSIS (TOPSIS)",
            "=" * 70,
            f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
            "",
        ]
        if not result.success:
            lines.extend([f"Analysis failed: {result.error}", "",
                          result.recommendations.strategic])
            return "\n".join(lines) + "\n"

        meta = result.analysis_metadata
        lines.append(f"Branches analyzed: {meta.total_branches}")
        lines.append("Criteria weights:")
        for key, weight in meta.weights_used.items():
            lines.append(f"  {key:<22} {weight:.2f}")

        lines.extend(["", "-" * 70, "RANKING", "-" * 70])
        for b in result.ranked_branches:
            lines.append(f"  {b.rank:>3}. {b.branch_name:<30} "
                         f"{b.topsis_score:.4f} ({b.score_percentage:>3}%)  {b.category.value}")

        lines.extend(["", "-" * 70, "STRATEGIC RECOMMENDATIONS", "-" * 70,
                      result.recommendations.strategic, ""])

        lines.extend(["-" * 70, "BRANCH-LEVEL RECOMMENDATIONS", "-" * 70])
        for rec in result.recommendations.branch_level:
            lines.append(f"  {rec.branch_name} [{rec.priority} priority]")
            lines.extend(f"    - {item}" for item in rec.recommendations)

        if sensitivity is not None:
            lines.append(sensitivity.summary())

        return "\n".join(lines) + "\n"

    def save_all(self,
                 result: AnalysisResult,
                 sensitivity: Optional[SensitivityResult] = None) -> Dict[str, str]:
        """Save every artefact available for ``result``."""
        saved = {'report': self.save_report(result, sensitivity)}
        if result.success:
            saved['rankings'] = self.save_rankings(result)
            saved['analysis'] = self.save_analysis_json(result)
            saved['recommendations'] = self.save_branch_recommendations(result)
        if sensitivity is not None:
            saved['sensitivity'] = self.save_sensitivity(sensitivity)
        self.logger.info(f"Saved {len(saved)} output files to {self.base_dir}")
        return saved


def create_output_manager(output_dir: str = 'outputs') -> OutputManager:
    """Factory function for OutputManager."""
    return OutputManager(output_dir)
