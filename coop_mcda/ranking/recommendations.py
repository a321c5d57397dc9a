# -*- coding: utf-8 -*-
"""
Rule-based recommendations derived from a TOPSIS ranking.

Strategic text summarizes the category mix across all branches;
branch-level advice is keyed off simple condition checks on each
branch's metrics and score.
"""

from typing import List, Sequence

from ..config import Category, CategoryThresholds
from .results import (
    BranchRecommendation, RankedBranch, Recommendations, round_half_up,
)


DEFAULT_BRANCH_ADVICE = "Continue monitoring performance and maintain current operations"
MIN_ACTIVE_MEMBERS = 100


def generate_recommendations(ranked: Sequence[RankedBranch],
                             thresholds: CategoryThresholds = CategoryThresholds()
                             ) -> Recommendations:
    """Build strategic and branch-level recommendations."""
    excellent = [b for b in ranked if b.category is Category.EXCELLENT]
    good = [b for b in ranked if b.category is Category.GOOD]
    needs_improvement = [b for b in ranked if b.category is Category.NEEDS_IMPROVEMENT]

    return Recommendations(
        strategic=strategic_summary(excellent, good, needs_improvement),
        branch_level=tuple(branch_recommendation(b, thresholds) for b in ranked),
    )


def strategic_summary(excellent: Sequence[RankedBranch],
                      good: Sequence[RankedBranch],
                      needs_improvement: Sequence[RankedBranch]) -> str:
    """One paragraph naming the branches in each category."""
    sentences: List[str] = []

    if excellent:
        names = ', '.join(b.branch_name for b in excellent)
        sentences.append(
            f"Focus on replicating successful strategies from top-performing branches: "
            f"{names}. These branches show balanced performance across all criteria "
            f"and should serve as models for others.")

    if needs_improvement:
        names = ', '.join(b.branch_name for b in needs_improvement)
        sentences.append(
            f"Allocate additional resources and support to branches requiring improvement: "
            f"{names}. Consider targeted interventions based on specific performance gaps.")

    if good:
        sentences.append(
            "Branches in the 'Good' category have solid foundations but may benefit "
            "from targeted improvements in specific areas to reach 'Excellent' status.")

    total = len(excellent) + len(good) + len(needs_improvement)
    excellent_pct = round_half_up(len(excellent) / total * 100) if total else 0

    if excellent_pct >= 50:
        sentences.append(
            f"Strong overall performance with {excellent_pct}% of branches achieving "
            f"'Excellent' status. Focus on maintaining current strategies while "
            f"addressing remaining gaps.")
    elif excellent_pct >= 25:
        sentences.append(
            f"Moderate performance with {excellent_pct}% of branches achieving "
            f"'Excellent' status. Focus on elevating 'Good' branches to 'Excellent' status.")
    else:
        sentences.append(
            f"Significant improvement opportunities identified with only {excellent_pct}% "
            f"of branches achieving 'Excellent' status. Consider comprehensive "
            f"performance enhancement initiatives.")

    return ' '.join(sentences)


def priority_for(score: float, thresholds: CategoryThresholds = CategoryThresholds()) -> str:
    # Same cut points as the categories
    if score < thresholds.good:
        return 'High'
    if score < thresholds.excellent:
        return 'Medium'
    return 'Low'


def branch_recommendation(ranked: RankedBranch,
                          thresholds: CategoryThresholds = CategoryThresholds()
                          ) -> BranchRecommendation:
    """Advice bullets and priority for a single ranked branch."""
    branch = ranked.branch
    score = ranked.topsis_score
    advice: List[str] = []

    if branch.total_savings < branch.total_disbursements:
        advice.append("Focus on increasing savings deposits to improve financial stability")

    if branch.active_members < MIN_ACTIVE_MEMBERS:
        advice.append("Implement member acquisition strategies to increase active membership")

    if branch.net_interest_income < 0:
        advice.append("Improve loan portfolio yield and funding costs to restore positive net interest income")

    if branch.performance_pct < 0:
        advice.append("Review operational efficiency and cost management practices")

    if score < thresholds.good:
        advice.append("Develop comprehensive improvement plan addressing multiple performance areas")

    if score >= thresholds.excellent:
        advice.append("Maintain current successful strategies and consider sharing best practices with other branches")

    return BranchRecommendation(
        branch_id=branch.branch_id,
        branch_name=branch.branch_name,
        score=score,
        category=ranked.category,
        recommendations=tuple(advice or [DEFAULT_BRANCH_ADVICE]),
        priority=priority_for(score, thresholds),
    )
