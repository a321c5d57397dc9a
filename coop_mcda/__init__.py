# -*- coding: utf-8 -*-
"""
coop-mcda: Branch Performance Ranking for Cooperatives
======================================================

Ranks cooperative branches with TOPSIS over five financial criteria
and derives rule-based recommendations.

Package Structure
-----------------
coop_mcda/
├── config.py           # Criteria, weights, thresholds, paths
├── logger.py           # Logging setup and console reporting
├── data_loader.py      # BranchRecord, numeric coercion, CSV loading
├── mcdm/
│   └── topsis.py       # TOPSIS calculator
├── ranking/
│   ├── pipeline.py     # analyze(), BranchRankingEngine
│   ├── results.py      # RankedBranch, AnalysisResult
│   ├── recommendations.py
│   └── enhancer.py     # Optional model-written recommendations
├── analysis/
│   └── sensitivity.py  # Monte Carlo weight sensitivity
├── output_manager.py   # CSV / JSON / text report export
├── visualization.py    # Score and sensitivity charts
└── cli.py              # Command-line entry point

Quick Start
-----------
>>> from coop_mcda import analyze
>>> result = analyze([
...     {'branch_name': 'Main', 'total_savings': 700000, 'total_disbursements': 200000,
...      'net_interest_income': 50000, 'active_members': 150, 'performance_pct': 10},
...     {'branch_name': 'North', 'total_savings': '200000', 'total_disbursements': 600000,
...      'net_interest_income': -10000, 'active_members': 40, 'performance_pct': -5},
... ])
>>> [(b.rank, b.branch_name, b.category.value) for b in result.ranked_branches]
[(1, 'Main', 'Excellent'), (2, 'North', 'Needs Improvement')]
"""

from .config import (
    Config,
    CriteriaConfig,
    CriterionSpec,
    CategoryThresholds,
    Category,
    Direction,
    InvalidWeights,
    get_default_config,
    get_config,
    set_config,
    reset_config,
)
from .logger import (
    setup_logger,
    get_logger,
    PipelineLogger,
    log_context,
    timed_operation,
)
from .data_loader import (
    BranchRecord,
    InvalidInput,
    to_finite_float,
    records_from_report_rows,
    load_branches_csv,
)
from .mcdm import TOPSISCalculator, TOPSISResult
from .ranking import (
    analyze,
    BranchRankingEngine,
    AnalysisResult,
    RankedBranch,
    Recommendations,
    BranchRecommendation,
    RecommendationEnhancer,
    TextModelEnhancer,
    enhance_recommendations,
)
from .analysis import SensitivityAnalysis, SensitivityResult, run_sensitivity_analysis
from .output_manager import OutputManager, create_output_manager

__version__ = '1.0.0'

__all__ = [
    # Configuration
    'Config',
    'CriteriaConfig',
    'CriterionSpec',
    'CategoryThresholds',
    'Category',
    'Direction',
    'InvalidWeights',
    'get_default_config',
    'get_config',
    'set_config',
    'reset_config',

    # Logging
    'setup_logger',
    'get_logger',
    'PipelineLogger',
    'log_context',
    'timed_operation',

    # Data
    'BranchRecord',
    'InvalidInput',
    'to_finite_float',
    'records_from_report_rows',
    'load_branches_csv',

    # Ranking
    'TOPSISCalculator',
    'TOPSISResult',
    'analyze',
    'BranchRankingEngine',
    'AnalysisResult',
    'RankedBranch',
    'Recommendations',
    'BranchRecommendation',
    'RecommendationEnhancer',
    'TextModelEnhancer',
    'enhance_recommendations',

    # Analysis & output
    'SensitivityAnalysis',
    'SensitivityResult',
    'run_sensitivity_analysis',
    'OutputManager',
    'create_output_manager',
]
