# -*- coding: utf-8 -*-
"""Branch ranking: TOPSIS pipeline, result containers and recommendations."""

from .results import (
    RankedBranch,
    BranchRecommendation,
    Recommendations,
    AnalysisMetadata,
    AnalysisResult,
    round_half_up,
)
from .recommendations import (
    generate_recommendations,
    strategic_summary,
    branch_recommendation,
    priority_for,
)
from .pipeline import (
    analyze,
    build_decision_matrix,
    resolve_weights,
    rank_branches,
    BranchRankingEngine,
)
from .enhancer import (
    RecommendationEnhancer,
    TextModelEnhancer,
    EnhancedRecommendations,
    EnhancementError,
    enhance_recommendations,
)

__all__ = [
    'RankedBranch',
    'BranchRecommendation',
    'Recommendations',
    'AnalysisMetadata',
    'AnalysisResult',
    'round_half_up',
    'generate_recommendations',
    'strategic_summary',
    'branch_recommendation',
    'priority_for',
    'analyze',
    'build_decision_matrix',
    'resolve_weights',
    'rank_branches',
    'BranchRankingEngine',
    'RecommendationEnhancer',
    'TextModelEnhancer',
    'EnhancedRecommendations',
    'EnhancementError',
    'enhance_recommendations',
]
