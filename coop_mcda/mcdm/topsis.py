# -*- coding: utf-8 -*-
"""
TOPSIS Implementation
=====================

Technique for Order Preference by Similarity to Ideal Solution
(Hwang & Yoon, 1981), with vector normalization and explicit handling
of degenerate columns and zero distances.
"""

import numpy as np
import pandas as pd
from typing import Dict, List, Mapping, Optional, Tuple
from dataclasses import dataclass


@dataclass
class TOPSISResult:
    """Result container for TOPSIS calculation."""
    scores: pd.Series                    # Closeness coefficients
    ranks: pd.Series                     # 1-based positions, best first
    d_positive: pd.Series                # Distance to ideal
    d_negative: pd.Series                # Distance to anti-ideal
    normalized_matrix: pd.DataFrame      # Vector-normalized matrix
    weighted_matrix: pd.DataFrame        # Weighted normalized matrix
    ideal_solution: pd.Series            # Ideal solution values
    anti_ideal_solution: pd.Series       # Anti-ideal solution values
    weights: Dict[str, float]            # Weights used

    @property
    def order(self) -> List:
        """Alternatives sorted from best to worst."""
        return list(self.ranks.sort_values(kind='stable').index)

    def top_n(self, n: int = 10) -> pd.DataFrame:
        """Get top n alternatives."""
        return pd.DataFrame({
            'Score': self.scores,
            'Rank': self.ranks
        }).sort_values('Rank').head(n)

    def bottom_n(self, n: int = 10) -> pd.DataFrame:
        """Get bottom n alternatives."""
        return pd.DataFrame({
            'Score': self.scores,
            'Rank': self.ranks
        }).sort_values('Rank', ascending=False).head(n)

    def summary(self) -> str:
        lines = [
            f"\n{'='*60}",
            "TOPSIS RESULTS",
            f"{'='*60}",
            f"\nAlternatives: {len(self.ranks)}",
            f"Criteria: {len(self.weights)}",
            "\nIdeal / anti-ideal:",
        ]
        for col in self.ideal_solution.index:
            lines.append(
                f"  {col}: {self.ideal_solution[col]:.6f} / "
                f"{self.anti_ideal_solution[col]:.6f}")
        lines.append("\nRanking:")
        for idx, row in self.top_n(len(self.ranks)).iterrows():
            lines.append(f"  {int(row['Rank'])}. {idx}: Score={row['Score']:.4f}")
        lines.append("=" * 60)
        return "\n".join(lines)


class TOPSISCalculator:
    """
    TOPSIS calculator over a decision matrix (alternatives × criteria).

    Columns listed in ``cost_criteria`` prefer lower values; all other
    columns are benefit criteria.
    """

    def __init__(self, cost_criteria: Optional[List[str]] = None):
        self.cost_criteria = list(cost_criteria or [])

    def calculate(self,
                  data: pd.DataFrame,
                  weights: Mapping[str, float]) -> TOPSISResult:
        """
        Calculate TOPSIS scores and rankings.

        Parameters
        ----------
        data : pd.DataFrame
            Decision matrix (alternatives × criteria), numeric
        weights : Mapping[str, float]
            Weight per column; columns without a weight get 0

        Returns
        -------
        TOPSISResult
            Complete TOPSIS results
        """
        weights = {col: float(weights.get(col, 0.0)) for col in data.columns}

        # Step 1: Normalize
        norm_matrix = self._normalize(data)
        norm_df = pd.DataFrame(norm_matrix, index=data.index, columns=data.columns)

        # Step 2: Apply weights
        weight_array = np.array([weights[col] for col in data.columns])
        weighted_df = pd.DataFrame(norm_matrix * weight_array,
                                   index=data.index,
                                   columns=data.columns)

        # Step 3: Determine ideal solutions
        ideal, anti_ideal = self._get_ideal_solutions(weighted_df)

        # Step 4: Calculate distances
        d_pos = self._calculate_distance(weighted_df, ideal)
        d_neg = self._calculate_distance(weighted_df, anti_ideal)

        # Step 5: Closeness coefficient, 0 where both distances vanish
        denom = d_pos + d_neg
        scores = np.divide(d_neg, denom, out=np.zeros_like(d_neg), where=denom != 0)
        scores = pd.Series(np.clip(scores, 0.0, 1.0), index=data.index, name='TOPSIS_Score')

        # Step 6: Rank, ties keep input order
        order = np.argsort(-scores.values, kind='stable')
        rank_values = np.empty(len(order), dtype=int)
        rank_values[order] = np.arange(1, len(order) + 1)
        ranks = pd.Series(rank_values, index=data.index, name='TOPSIS_Rank')

        return TOPSISResult(
            scores=scores,
            ranks=ranks,
            d_positive=pd.Series(d_pos, index=data.index),
            d_negative=pd.Series(d_neg, index=data.index),
            normalized_matrix=norm_df,
            weighted_matrix=weighted_df,
            ideal_solution=ideal,
            anti_ideal_solution=anti_ideal,
            weights=weights
        )

    def _normalize(self, data: pd.DataFrame) -> np.ndarray:
        """
        Vector normalization; all-zero columns stay zero.

        Columns are first divided by their largest magnitude so squaring
        cannot overflow for very large values.
        """
        X = data.values.astype(float)
        scale = np.abs(X).max(axis=0, initial=0.0)
        X = np.divide(X, scale, out=np.zeros_like(X), where=scale != 0)
        norm = np.sqrt((X ** 2).sum(axis=0))
        return np.divide(X, norm, out=np.zeros_like(X), where=norm != 0)

    def _get_ideal_solutions(self, weighted_df: pd.DataFrame
                             ) -> Tuple[pd.Series, pd.Series]:
        """Determine ideal and anti-ideal solutions."""
        ideal = pd.Series(index=weighted_df.columns, dtype=float)
        anti_ideal = pd.Series(index=weighted_df.columns, dtype=float)

        for col in weighted_df.columns:
            if col in self.cost_criteria:
                ideal[col] = weighted_df[col].min()
                anti_ideal[col] = weighted_df[col].max()
            else:  # Benefit criteria (default)
                ideal[col] = weighted_df[col].max()
                anti_ideal[col] = weighted_df[col].min()

        return ideal, anti_ideal

    def _calculate_distance(self, weighted_df: pd.DataFrame,
                            reference: pd.Series) -> np.ndarray:
        """Calculate Euclidean distance to reference point."""
        diff = weighted_df - reference
        return np.sqrt((diff ** 2).sum(axis=1)).values.astype(float)


def topsis_ranks(matrix: np.ndarray,
                 weights: np.ndarray,
                 cost_mask: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Array-level ranking helper used by sensitivity analysis.

    Returns 1-based ranks aligned with the rows of ``matrix``.
    """
    columns = [f"C{j+1}" for j in range(matrix.shape[1])]
    cost = [] if cost_mask is None else [c for c, m in zip(columns, cost_mask) if m]
    result = TOPSISCalculator(cost_criteria=cost).calculate(
        pd.DataFrame(matrix, columns=columns),
        dict(zip(columns, np.asarray(weights, dtype=float)))
    )
    return result.ranks.values
