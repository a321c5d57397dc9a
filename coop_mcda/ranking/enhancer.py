# -*- coding: utf-8 -*-
"""
Optional enhancement of recommendation text.

A ``RecommendationEnhancer`` turns a ranking into richer prose, usually
through a hosted language model supplied by the caller. Any failure
(timeout, authentication, malformed reply) falls back to the rule-based
recommendations already carried by the ``AnalysisResult``.
"""

import json
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional
import logging

from ..config import Category
from .results import AnalysisResult, BranchRecommendation, RankedBranch, Recommendations

logger = logging.getLogger('coop_mcda.ranking')

SOURCE_AI = 'ai'
SOURCE_RULE_BASED = 'rule-based'

_JSON_OBJECT = re.compile(r'\{[\s\S]*\}')


class EnhancementError(ValueError):
    """Raised by an enhancer whose output cannot be used."""


@dataclass(frozen=True)
class EnhancedRecommendations:
    recommendations: Recommendations
    source: str
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {'source': self.source, 'recommendations': self.recommendations.to_dict()}
        if self.error:
            data['error'] = self.error
        return data


class RecommendationEnhancer(ABC):
    """Produces recommendations for a successful analysis."""

    @abstractmethod
    def enhance(self,
                result: AnalysisResult,
                context: Optional[Mapping[str, Any]] = None) -> Recommendations:
        """Return recommendations, raising on any failure."""


class TextModelEnhancer(RecommendationEnhancer):
    """
    Enhancer backed by a text-completion callable.

    Parameters
    ----------
    complete : Callable[[str], str]
        Sends a prompt to a language model and returns its raw reply.
        The reply must contain a JSON object with a ``strategic`` string
        and optionally a ``branchLevel`` list.
    """

    def __init__(self, complete: Callable[[str], str]):
        self.complete = complete

    def build_prompt(self,
                     result: AnalysisResult,
                     context: Optional[Mapping[str, Any]] = None) -> str:
        meta = result.analysis_metadata
        lines = [
            "You are a financial analyst for a cooperative. Branches were ranked with",
            "TOPSIS (Technique for Order of Preference by Similarity to Ideal Solution).",
            "",
            f"Branches analyzed: {meta.total_branches}",
            "Criteria weights: " + ", ".join(
                f"{k}={v:.2f}" for k, v in meta.weights_used.items()),
            "",
            "Ranking:",
        ]
        for b in result.ranked_branches:
            r = b.branch
            lines.append(
                f"{b.rank}. {b.branch_name} (id {b.branch_id}) - "
                f"TOPSIS Score: {b.topsis_score * 100:.1f}% "
                f"({b.category.value}); savings {r.total_savings:,.2f}, "
                f"disbursements {r.total_disbursements:,.2f}, "
                f"net interest income {r.net_interest_income:,.2f}, "
                f"active members {r.active_members:.0f}")
        if context:
            lines.extend(["", "Report context:"])
            lines.extend(f"- {k}: {v}" for k, v in context.items())
        lines.extend([
            "",
            'Reply with JSON only: {"strategic": "...", "branchLevel": '
            '[{"branchId": "...", "branchName": "...", "recommendations": ["..."], "priority": "High|Medium|Low"}]}',
        ])
        return "\n".join(lines)

    def parse_response(self, reply: str, result: AnalysisResult) -> Recommendations:
        if not reply or not reply.strip():
            raise EnhancementError("Model returned an empty response")

        match = _JSON_OBJECT.search(reply)
        if not match:
            raise EnhancementError("Model response is not in JSON format")
        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            raise EnhancementError(f"Failed to parse model response: {e}") from e

        strategic = parsed.get('strategic') if isinstance(parsed, dict) else None
        if not isinstance(strategic, str) or not strategic.strip():
            raise EnhancementError('Model response missing required "strategic" field')

        return Recommendations(
            strategic=strategic.strip(),
            branch_level=tuple(self._branch_level(parsed.get('branchLevel') or [], result)),
        )

    def _branch_level(self, items: List[Any],
                      result: AnalysisResult) -> List[BranchRecommendation]:
        """
        Attach reply items to ranked branches.

        Items are matched on ``branchId`` when given, else on
        ``branchName``; each branch takes at most one item, so repeated
        names are assigned in rank order.
        """
        unclaimed = list(result.ranked_branches)
        advice = []
        for item in items:
            if not isinstance(item, dict):
                continue
            ranked = _claim(unclaimed, item)
            if ranked is None:
                continue
            bullets = item.get('recommendations') or []
            if isinstance(bullets, str):
                bullets = [bullets]
            advice.append(BranchRecommendation(
                branch_id=ranked.branch_id,
                branch_name=ranked.branch_name,
                score=ranked.topsis_score,
                category=ranked.category,
                recommendations=tuple(str(b) for b in bullets),
                priority=str(item.get('priority') or _priority_of(ranked.category)),
            ))
        return advice

    def enhance(self,
                result: AnalysisResult,
                context: Optional[Mapping[str, Any]] = None) -> Recommendations:
        prompt = self.build_prompt(result, context)
        logger.debug(f"Enhancement prompt prepared ({len(prompt)} characters)")
        return self.parse_response(self.complete(prompt), result)


def _claim(unclaimed: List[RankedBranch], item: Mapping[str, Any]) -> Optional[RankedBranch]:
    """Remove and return the first unclaimed branch a reply item refers to."""
    branch_id = item.get('branchId')
    for i, ranked in enumerate(unclaimed):
        if branch_id is not None:
            found = str(ranked.branch_id) == str(branch_id)
        else:
            found = ranked.branch_name == item.get('branchName')
        if found:
            return unclaimed.pop(i)
    return None


def _priority_of(category: Category) -> str:
    return {
        Category.EXCELLENT: 'Low',
        Category.GOOD: 'Medium',
        Category.NEEDS_IMPROVEMENT: 'High',
    }[category]


def enhance_recommendations(result: AnalysisResult,
                            enhancer: Optional[RecommendationEnhancer] = None,
                            context: Optional[Mapping[str, Any]] = None
                            ) -> EnhancedRecommendations:
    """
    Enhance the recommendations of ``result``, falling back to the
    rule-based text on any enhancer failure.
    """
    fallback = result.recommendations
    if enhancer is None or not result.success:
        return EnhancedRecommendations(fallback, SOURCE_RULE_BASED)

    try:
        enhanced = enhancer.enhance(result, context)
        if not isinstance(enhanced, Recommendations):
            raise EnhancementError(
                f"Enhancer returned {type(enhanced).__name__}, expected Recommendations")
    except Exception as e:
        logger.warning(f"Recommendation enhancement failed, using rule-based text: {e}")
        return EnhancedRecommendations(fallback, SOURCE_RULE_BASED, error=str(e))

    if not enhanced.branch_level:
        enhanced = Recommendations(enhanced.strategic, fallback.branch_level)
    return EnhancedRecommendations(enhanced, SOURCE_AI)
