# -*- coding: utf-8 -*-
"""
Branch Ranking Pipeline
=======================

Ranks cooperative branches with TOPSIS over five criteria and derives
rule-based recommendations.

Stages
------
1. Decision matrix   — one row per branch, criteria coerced to float
2. TOPSIS            — vector normalization, weighting, ideal /
                       negative-ideal solutions, distances, closeness
3. Ranking           — descending score, categories by threshold
4. Recommendations   — strategic summary and branch-level advice

``analyze`` never raises for bad input; failures come back as an
``AnalysisResult`` with ``success=False``.
"""

import threading
import pandas as pd
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional
import logging

from ..config import Config, CriteriaConfig, get_config
from ..data_loader import BranchRecord, InvalidInput, coerce_branches, to_finite_float
from ..logger import timed_operation
from ..mcdm.topsis import TOPSISCalculator, TOPSISResult
from .recommendations import generate_recommendations
from .results import AnalysisMetadata, AnalysisResult, RankedBranch

logger = logging.getLogger('coop_mcda.ranking')


def build_decision_matrix(records: List[BranchRecord],
                          criteria: CriteriaConfig) -> pd.DataFrame:
    """N × 5 float matrix, rows in input order, columns in criteria order."""
    return pd.DataFrame(
        [[getattr(r, key) for key in criteria.keys] for r in records],
        columns=criteria.keys,
        dtype=float,
    )


def resolve_weights(criteria: CriteriaConfig,
                    weights: Optional[Mapping[str, Any]]) -> Dict[str, float]:
    """Merge per-call weights over the configured ones."""
    resolved = criteria.weights
    if not weights:
        return resolved

    unknown = sorted(set(weights) - set(resolved))
    if unknown:
        logger.warning(f"Ignoring weights for unknown criteria: {unknown}")

    for key in resolved:
        if key in weights:
            resolved[key] = to_finite_float(weights[key])
    return resolved


def rank_branches(records: List[BranchRecord],
                  topsis: TOPSISResult,
                  config: Config) -> List[RankedBranch]:
    """Attach scores, ranks and categories; returns branches best first."""
    ranked = []
    for i in topsis.order:
        score = float(topsis.scores.iloc[i])
        ranked.append(RankedBranch(
            branch=records[i],
            topsis_score=score,
            rank=int(topsis.ranks.iloc[i]),
            category=config.thresholds.categorize(score),
        ))
    return ranked


def analyze(branches: Any,
            weights: Optional[Mapping[str, Any]] = None,
            config: Optional[Config] = None) -> AnalysisResult:
    """
    Rank branches by TOPSIS closeness to the ideal branch.

    Parameters
    ----------
    branches : sequence of mappings or BranchRecord, or DataFrame
        One entry per branch. Numeric fields may be strings.
    weights : Mapping[str, float], optional
        Per-call weights merged over the configured criteria weights.
    config : Config, optional
        Criteria and thresholds, defaults to the process configuration.

    Returns
    -------
    AnalysisResult
        ``success=False`` with an error message when the input is unusable.
    """
    config = config or get_config()
    try:
        records = coerce_branches(branches)
        weights_used = resolve_weights(config.criteria, weights)

        with timed_operation(logger, f"TOPSIS ranking of {len(records)} branches",
                             level=logging.DEBUG):
            matrix = build_decision_matrix(records, config.criteria)
            topsis = TOPSISCalculator(
                cost_criteria=config.criteria.cost_criteria
            ).calculate(matrix, weights_used)
            ranked = rank_branches(records, topsis, config)
            recommendations = generate_recommendations(ranked, config.thresholds)
    except InvalidInput as e:
        logger.error(f"Error in MCDA analysis: {e}")
        return AnalysisResult.failure(str(e))
    except (ValueError, TypeError, ArithmeticError) as e:
        logger.error(f"Error in MCDA analysis: {e}", exc_info=True)
        return AnalysisResult.failure(str(e))

    logger.info(f"Ranked {len(ranked)} branches; top: "
                f"{ranked[0].branch_name} ({ranked[0].topsis_score:.4f})")

    return AnalysisResult(
        success=True,
        ranked_branches=tuple(ranked),
        topsis_scores=tuple(float(s) for s in topsis.scores),
        ideal_solution=tuple(float(v) for v in topsis.ideal_solution),
        negative_ideal_solution=tuple(float(v) for v in topsis.anti_ideal_solution),
        recommendations=recommendations,
        analysis_metadata=AnalysisMetadata(
            total_branches=len(records),
            criteria_used=tuple(config.criteria.keys),
            weights_used=weights_used,
            timestamp=datetime.now(timezone.utc).isoformat(),
        ),
    )


class BranchRankingEngine:
    """
    Ranking service holding a mutable weight configuration.

    Weight updates are validated before they are committed, under a lock,
    so concurrent analyses always see one complete weight set.
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or get_config()
        self._criteria = self.config.criteria
        self._lock = threading.Lock()

    @property
    def criteria(self) -> CriteriaConfig:
        return self._criteria

    def analyze_branch_performance(self,
                                   branches: Any,
                                   custom_weights: Optional[Mapping[str, Any]] = None
                                   ) -> AnalysisResult:
        """Run :func:`analyze` against the current weight snapshot."""
        snapshot = replace(self.config, criteria=self._criteria)
        return analyze(branches, custom_weights, snapshot)

    def update_weights(self, new_weights: Mapping[str, float]) -> None:
        """
        Merge and validate new weights, then commit them.

        Raises
        ------
        InvalidWeights
            If the merged weights are invalid; the current weights stay.
        """
        with self._lock:
            updated = self._criteria.with_weights(new_weights)
            self._criteria = updated
        logger.info(f"Criteria weights updated: {updated.weights}")

    def get_criteria_configuration(self) -> Dict[str, Dict]:
        """Current criteria and weights."""
        return self._criteria.to_dict()


