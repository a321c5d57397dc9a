# -*- coding: utf-8 -*-
"""
Sensitivity Analysis
====================

Weight perturbation and robustness testing for the branch ranking.
"""

import numpy as np
import pandas as pd
from typing import Any, Dict, List, Mapping, Optional, Tuple
from dataclasses import dataclass
from scipy.stats import spearmanr
import logging

from ..config import Config, SensitivityConfig, get_config
from ..data_loader import coerce_branches
from ..mcdm.topsis import topsis_ranks
from ..ranking.pipeline import build_decision_matrix, resolve_weights

logger = logging.getLogger('coop_mcda.analysis')


@dataclass
class SensitivityResult:
    """Result container for sensitivity analysis."""
    weight_sensitivity: Dict[str, float]    # Sensitivity index per criterion
    rank_stability: Dict[str, float]        # Rank stability per branch
    critical_weights: Dict[str, Tuple[float, float]]  # Weight ranges keeping the leader
    overall_robustness: float               # 0-1 robustness score
    top_n_stability: Dict[int, float]       # Share of runs reproducing the top N
    mean_rank_correlation: float            # Spearman rho vs. base ranking
    base_ranks: Dict[str, int]
    rank_distribution: np.ndarray           # simulations × branches

    def summary(self) -> str:
        lines = [
            f"\n{'='*60}",
            "SENSITIVITY ANALYSIS RESULTS",
            f"{'='*60}",
            f"\nOverall Robustness Score: {self.overall_robustness:.4f}",
            f"Mean Spearman correlation with base ranking: {self.mean_rank_correlation:.4f}",
            f"\n{'─'*30}",
            "WEIGHT SENSITIVITY (higher = more sensitive)",
            f"{'─'*30}"
        ]
        sorted_sens = sorted(self.weight_sensitivity.items(),
                             key=lambda x: x[1], reverse=True)
        for criterion, sens in sorted_sens:
            bar = '█' * int(sens * 20)
            lines.append(f"  {criterion}: {sens:.4f} {bar}")

        lines.extend([
            f"\n{'─'*30}",
            "TOP-N STABILITY",
            f"{'─'*30}"
        ])
        for n, stability in self.top_n_stability.items():
            lines.append(f"  Top {n}: {stability:.1%} stable")

        lines.extend([
            f"\n{'─'*30}",
            "CRITICAL WEIGHT RANGES",
            f"{'─'*30}"
        ])
        for criterion, (low, high) in self.critical_weights.items():
            lines.append(f"  {criterion}: [{low:.3f}, {high:.3f}]")

        lines.append("=" * 60)
        return "\n".join(lines)

    def stability_frame(self) -> pd.DataFrame:
        """Per-branch base rank, mean simulated rank and stability."""
        names = list(self.base_ranks)
        return pd.DataFrame({
            'base_rank': [self.base_ranks[n] for n in names],
            'mean_rank': self.rank_distribution.mean(axis=0),
            'rank_std': self.rank_distribution.std(axis=0),
            'stability': [self.rank_stability[n] for n in names],
        }, index=pd.Index(names, name='branch_name')).sort_values('base_rank')


def _renormalize(weights: np.ndarray) -> np.ndarray:
    total = weights.sum()
    return weights / total if total > 0 else weights


class SensitivityAnalysis:
    """
    Monte Carlo sensitivity analysis for TOPSIS rankings.

    Tests ranking robustness to changes in the criterion weights.
    """

    def __init__(self,
                 n_simulations: int = 500,
                 perturbation_range: float = 0.2,
                 seed: int = 42,
                 top_n: Optional[List[int]] = None):
        """
        Parameters
        ----------
        n_simulations : int
            Number of Monte Carlo simulations
        perturbation_range : float
            Maximum relative weight perturbation
        seed : int
            Random seed for reproducibility
        top_n : List[int], optional
            Leading group sizes checked for stability
        """
        self.n_simulations = n_simulations
        self.perturbation_range = perturbation_range
        self.seed = seed
        self.top_n = top_n or [1, 3, 5]

    @classmethod
    def from_config(cls, config: SensitivityConfig) -> 'SensitivityAnalysis':
        return cls(n_simulations=config.n_simulations,
                   perturbation_range=config.perturbation_range,
                   seed=config.seed,
                   top_n=list(config.top_n))

    def analyze(self,
                decision_matrix: pd.DataFrame,
                weights: Mapping[str, float],
                cost_criteria: Optional[List[str]] = None,
                alternative_names: Optional[List[str]] = None) -> SensitivityResult:
        """
        Perform sensitivity analysis.

        Parameters
        ----------
        decision_matrix : pd.DataFrame
            Alternatives × criteria
        weights : Mapping[str, float]
            Base weight per column
        cost_criteria : List[str], optional
            Columns where lower values are better
        alternative_names : List[str], optional
            Labels for the rows, defaults to the frame's index
        """
        rng = np.random.default_rng(self.seed)
        criteria = list(decision_matrix.columns)
        matrix = decision_matrix.values.astype(float)
        base_weights = np.array([float(weights.get(c, 0.0)) for c in criteria])
        cost_mask = np.array([c in (cost_criteria or []) for c in criteria])

        if alternative_names is None:
            alternative_names = [str(i) for i in decision_matrix.index]

        def rank(w: np.ndarray) -> np.ndarray:
            return topsis_ranks(matrix, w, cost_mask)

        base_ranking = rank(base_weights)

        weight_sensitivity = self._weight_sensitivity(base_weights, base_ranking, rank, criteria)
        rankings = self._monte_carlo_perturbation(base_weights, rank, rng, len(matrix))
        rank_stability = self._calculate_rank_stability(rankings, alternative_names)
        critical_weights = self._find_critical_weights(base_weights, base_ranking, rank, criteria)
        top_n_stability = self._calculate_top_n_stability(rankings, base_ranking)
        correlation = self._mean_rank_correlation(rankings, base_ranking)

        logger.debug(f"Sensitivity analysis: {self.n_simulations} simulations, "
                     f"mean rank correlation {correlation:.4f}")

        return SensitivityResult(
            weight_sensitivity=weight_sensitivity,
            rank_stability=rank_stability,
            critical_weights=critical_weights,
            overall_robustness=float(np.mean(list(rank_stability.values()))),
            top_n_stability=top_n_stability,
            mean_rank_correlation=correlation,
            base_ranks={n: int(r) for n, r in zip(alternative_names, base_ranking)},
            rank_distribution=rankings,
        )

    def _weight_sensitivity(self, weights, base_ranking, rank, criteria_names) -> Dict[str, float]:
        """Average rank displacement when one weight is perturbed."""
        sensitivity = {}
        n_alternatives = len(base_ranking)

        for i, name in enumerate(criteria_names):
            rank_changes = []
            for delta in np.linspace(-self.perturbation_range,
                                     self.perturbation_range, 11):
                if np.isclose(delta, 0):
                    continue
                perturbed = weights.copy()
                perturbed[i] *= (1 + delta)
                new_ranking = rank(_renormalize(perturbed))
                rank_changes.append(np.abs(new_ranking - base_ranking).sum())
            sensitivity[name] = float(np.mean(rank_changes)) / n_alternatives

        max_sens = max(sensitivity.values(), default=0.0)
        if max_sens > 0:
            sensitivity = {k: v / max_sens for k, v in sensitivity.items()}
        return sensitivity

    def _monte_carlo_perturbation(self, weights, rank, rng, n_alternatives) -> np.ndarray:
        """Rankings under random multiplicative weight perturbations."""
        rankings = np.zeros((self.n_simulations, n_alternatives), dtype=int)
        for sim in range(self.n_simulations):
            factors = 1 + rng.uniform(-self.perturbation_range,
                                      self.perturbation_range,
                                      len(weights))
            rankings[sim] = rank(_renormalize(weights * factors))
        return rankings

    def _calculate_rank_stability(self, rankings: np.ndarray,
                                  names: List[str]) -> Dict[str, float]:
        """1 - std(rank) / (N / 2), floored at 0."""
        stability = {}
        max_std = len(names) / 2
        for i, name in enumerate(names):
            actual_std = rankings[:, i].std() if len(rankings) else 0.0
            stability[name] = float(max(0.0, 1 - actual_std / max_std))
        return stability

    def _find_critical_weights(self, weights, base_ranking, rank,
                               criteria_names) -> Dict[str, Tuple[float, float]]:
        """Weight ranges for each criterion that keep the same leader."""
        critical = {}
        leader = int(np.argmin(base_ranking))

        def keeps_leader(i: int, value: float) -> bool:
            test = weights.copy()
            test[i] = value
            return int(np.argmin(rank(_renormalize(test)))) == leader

        for i, name in enumerate(criteria_names):
            low, high = 0.0, weights[i]
            while high - low > 0.01:
                mid = (low + high) / 2
                if keeps_leader(i, mid):
                    high = mid
                else:
                    low = mid
            lower_bound = high

            low, high = weights[i], min(1.0, weights[i] * 3)
            while high - low > 0.01:
                mid = (low + high) / 2
                if keeps_leader(i, mid):
                    low = mid
                else:
                    high = mid
            upper_bound = low

            critical[name] = (float(lower_bound), float(upper_bound))

        return critical

    def _calculate_top_n_stability(self, rankings: np.ndarray,
                                   base_ranking: np.ndarray) -> Dict[int, float]:
        stability = {}
        n_alternatives = len(base_ranking)
        for n in self.top_n:
            if n > n_alternatives:
                continue
            base_top = set(np.argsort(base_ranking, kind='stable')[:n])
            matches = sum(
                set(np.argsort(sim, kind='stable')[:n]) == base_top
                for sim in rankings
            )
            stability[n] = matches / len(rankings) if len(rankings) else 1.0
        return stability

    def _mean_rank_correlation(self, rankings: np.ndarray,
                               base_ranking: np.ndarray) -> float:
        """Mean Spearman rho; identical rankings count as 1."""
        if len(base_ranking) < 2 or len(rankings) == 0:
            return 1.0
        rhos = []
        for sim in rankings:
            if np.array_equal(sim, base_ranking):
                rhos.append(1.0)
            else:
                rho = spearmanr(base_ranking, sim)[0]
                rhos.append(0.0 if np.isnan(rho) else float(rho))
        return float(np.mean(rhos))


def run_sensitivity_analysis(branches: Any,
                             weights: Optional[Mapping[str, Any]] = None,
                             config: Optional[Config] = None) -> SensitivityResult:
    """
    Sensitivity analysis straight from a branch list.

    Raises
    ------
    InvalidInput
        If the branch list is unusable.
    """
    config = config or get_config()
    records = coerce_branches(branches)
    matrix = build_decision_matrix(records, config.criteria)
    names = []
    for i, r in enumerate(records):
        name = r.branch_name or str(r.branch_id)
        names.append(f"{name} #{i + 1}" if name in names else name)

    analyzer = SensitivityAnalysis.from_config(config.sensitivity)
    return analyzer.analyze(
        matrix,
        resolve_weights(config.criteria, weights),
        cost_criteria=config.criteria.cost_criteria,
        alternative_names=names,
    )
