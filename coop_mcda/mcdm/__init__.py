# -*- coding: utf-8 -*-
"""
Multi-Criteria Decision Making
==============================

Usage
-----
>>> from coop_mcda.mcdm import TOPSISCalculator
>>> result = TOPSISCalculator(cost_criteria=['total_disbursements']).calculate(df, weights)
>>> result.top_n(3)
"""

from .topsis import TOPSISCalculator, TOPSISResult, topsis_ranks

__all__ = [
    'TOPSISCalculator',
    'TOPSISResult',
    'topsis_ranks',
]
