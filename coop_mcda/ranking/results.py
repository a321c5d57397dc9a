# -*- coding: utf-8 -*-
"""
Result containers for branch ranking.

All containers are immutable; ``to_dict`` renders the camelCase shape
consumed by the report and dashboard layers.
"""

import math
import pandas as pd
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..config import Category
from ..data_loader import BranchRecord


ANALYSIS_ERROR_TEXT = "Unable to generate recommendations due to analysis error."


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class RankedBranch:
    """A branch record with its TOPSIS score, rank and category."""
    branch: BranchRecord
    topsis_score: float
    rank: int
    category: Category

    @property
    def score_percentage(self) -> int:
        return round_half_up(self.topsis_score * 100)

    @property
    def branch_id(self) -> Any:
        return self.branch.branch_id

    @property
    def branch_name(self) -> str:
        return self.branch.branch_name

    def to_dict(self) -> Dict[str, Any]:
        data = self.branch.to_dict()
        data.update({
            'topsisScore': self.topsis_score,
            'rank': self.rank,
            'category': self.category.value,
            'scorePercentage': self.score_percentage,
        })
        return data


@dataclass(frozen=True)
class BranchRecommendation:
    """Rule-based advice for one branch."""
    branch_id: Any
    branch_name: str
    score: float
    category: Category
    recommendations: Tuple[str, ...]
    priority: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'branchId': self.branch_id,
            'branchName': self.branch_name,
            'score': self.score,
            'category': self.category.value,
            'recommendations': list(self.recommendations),
            'priority': self.priority,
        }


@dataclass(frozen=True)
class Recommendations:
    """Strategic summary plus per-branch advice."""
    strategic: str
    branch_level: Tuple[BranchRecommendation, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'strategic': self.strategic,
            'branchLevel': [r.to_dict() for r in self.branch_level],
        }


@dataclass(frozen=True)
class AnalysisMetadata:
    total_branches: int
    criteria_used: Tuple[str, ...]
    weights_used: Dict[str, float]
    timestamp: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'totalBranches': self.total_branches,
            'criteriaUsed': list(self.criteria_used),
            'weightsUsed': dict(self.weights_used),
            'timestamp': self.timestamp,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """
    Outcome of one ranking run.

    On failure ``success`` is False, ``error`` holds the reason,
    ``ranked_branches`` is empty and the strategic text is the fixed
    analysis-error message.
    """
    success: bool
    ranked_branches: Tuple[RankedBranch, ...] = ()
    topsis_scores: Tuple[float, ...] = ()
    ideal_solution: Tuple[float, ...] = ()
    negative_ideal_solution: Tuple[float, ...] = ()
    recommendations: Recommendations = field(
        default_factory=lambda: Recommendations(strategic=ANALYSIS_ERROR_TEXT))
    analysis_metadata: Optional[AnalysisMetadata] = None
    error: Optional[str] = None

    @classmethod
    def failure(cls, error: str) -> 'AnalysisResult':
        return cls(success=False, error=error)

    def by_category(self, category: Category) -> List[RankedBranch]:
        return [b for b in self.ranked_branches if b.category is category]

    def to_dict(self) -> Dict[str, Any]:
        if not self.success:
            return {
                'success': False,
                'error': self.error,
                'rankedBranches': [],
                'recommendations': self.recommendations.to_dict(),
            }
        return {
            'success': True,
            'rankedBranches': [b.to_dict() for b in self.ranked_branches],
            'topsisScores': list(self.topsis_scores),
            'idealSolution': list(self.ideal_solution),
            'negativeIdealSolution': list(self.negative_ideal_solution),
            'recommendations': self.recommendations.to_dict(),
            'analysisMetadata': self.analysis_metadata.to_dict(),
        }

    def to_frame(self) -> pd.DataFrame:
        """Ranking as a DataFrame indexed by rank."""
        columns = ['rank', 'branch_id', 'branch_name', 'topsis_score',
                   'score_percentage', 'category']
        rows = [{
            'rank': b.rank,
            'branch_id': b.branch_id,
            'branch_name': b.branch_name,
            'topsis_score': b.topsis_score,
            'score_percentage': b.score_percentage,
            'category': b.category.value,
        } for b in self.ranked_branches]
        return pd.DataFrame(rows, columns=columns).set_index('rank')
