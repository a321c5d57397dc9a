# -*- coding: utf-8 -*-
"""Robustness analysis of branch rankings."""

from .sensitivity import SensitivityAnalysis, SensitivityResult, run_sensitivity_analysis

__all__ = [
    'SensitivityAnalysis',
    'SensitivityResult',
    'run_sensitivity_analysis',
]
