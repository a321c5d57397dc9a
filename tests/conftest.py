"""
Pytest configuration and fixtures for branch ranking tests.
"""
import logging

import pytest
import numpy as np
import pandas as pd


@pytest.fixture
def branch_a():
    return {
        'branch_id': 1,
        'branch_name': 'Main',
        'total_savings': 700000,
        'total_disbursements': 200000,
        'net_interest_income': 50000,
        'active_members': 150,
        'performance_pct': 10,
    }


@pytest.fixture
def branch_b():
    return {
        'branch_id': 2,
        'branch_name': 'North',
        'total_savings': 200000,
        'total_disbursements': 600000,
        'net_interest_income': -10000,
        'active_members': 40,
        'performance_pct': -5,
    }


@pytest.fixture
def two_branches(branch_a, branch_b):
    """Branch A dominates branch B on every criterion."""
    return [branch_a, branch_b]


@pytest.fixture
def sample_branches():
    """Twelve branches with mixed, partly string-typed metrics."""
    rng = np.random.default_rng(42)
    branches = []
    for i in range(12):
        branches.append({
            'branch_id': i + 1,
            'branch_name': f'Branch {i + 1:02d}',
            'total_savings': float(rng.uniform(50_000, 1_000_000)),
            'total_disbursements': str(round(rng.uniform(20_000, 800_000), 2)),
            'net_interest_income': float(rng.uniform(-50_000, 120_000)),
            'active_members': int(rng.integers(10, 400)),
            'performance_pct': float(rng.uniform(-20, 30)),
        })
    return branches


@pytest.fixture
def sample_frame(sample_branches):
    return pd.DataFrame(sample_branches)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo handler setup done by tests and the CLI."""
    yield
    from coop_mcda.logger import LOG_NAME, clear_context
    logger = logging.getLogger(LOG_NAME)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.filters.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    clear_context()
