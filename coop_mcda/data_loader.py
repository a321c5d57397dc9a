# -*- coding: utf-8 -*-
"""Branch performance records and their loading.

This module handles:
1. Total coercion of loosely typed numeric fields (strings, None, NaN)
2. Building ``BranchRecord`` values from report rows, mappings and CSV files
3. Validating that a branch list is a usable, non-empty sequence
"""

import math
import pandas as pd
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Union
from dataclasses import dataclass, field

from .config import CRITERIA_KEYS
from .logger import get_logger


class InvalidInput(ValueError):
    """Raised when a branch list cannot be analyzed."""


# Field aliases used by the report and transaction services
FIELD_ALIASES: Dict[str, tuple] = {
    'branch_id': ('branch_id', 'id'),
    'branch_name': ('branch_name', 'branch_location_only', 'branch_location'),
    'total_savings': ('total_savings',),
    'total_disbursements': ('total_disbursements',),
    'net_interest_income': ('net_interest_income', 'net_position'),
    'active_members': ('active_members',),
    'performance_pct': ('performance_pct', 'performancePct'),
}

_CURRENCY_SIGNS = '₱$€£'


def to_finite_float(value: Any, default: float = 0.0) -> float:
    """
    Coerce ``value`` to a finite float.

    Numbers pass through; numeric strings may carry whitespace, thousands
    separators, a trailing ``%`` or a leading currency sign. Anything else,
    including NaN and infinities, yields ``default``.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return float(value)

    if isinstance(value, str):
        text = value.strip().replace(',', '').replace('_', '')
        if text.endswith('%'):
            text = text[:-1].rstrip()
        sign = ''
        if text and text[0] in '+-':
            sign, text = text[:1], text[1:].lstrip()
        text = text.lstrip(_CURRENCY_SIGNS).strip()
        if not text:
            return default
        try:
            result = float(sign + text)
        except ValueError:
            return default
    else:
        try:
            result = float(value)
        except (TypeError, ValueError, OverflowError):
            return default

    return result if math.isfinite(result) else default


def _first_present(mapping: Mapping, keys: Iterable[str]) -> Any:
    for key in keys:
        value = mapping.get(key)
        if value is None:
            continue
        if isinstance(value, float) and math.isnan(value):
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


@dataclass(frozen=True)
class BranchRecord:
    """Performance of one branch over a reporting period."""
    branch_id: Any
    branch_name: str
    total_savings: float = 0.0
    total_disbursements: float = 0.0
    net_interest_income: float = 0.0
    active_members: float = 0.0
    performance_pct: float = 0.0
    extra: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def __post_init__(self):
        for key in CRITERIA_KEYS:
            object.__setattr__(self, key, to_finite_float(getattr(self, key)))
        object.__setattr__(self, 'extra', MappingProxyType(dict(self.extra)))

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> 'BranchRecord':
        """Build a record from a dict-like row, honouring field aliases."""
        values = {
            name: _first_present(row, aliases)
            for name, aliases in FIELD_ALIASES.items()
        }
        name = values.pop('branch_name')
        return cls(
            branch_name='' if name is None else str(name),
            extra=dict(row),
            **values,
        )

    @property
    def criteria_values(self) -> List[float]:
        return [getattr(self, key) for key in CRITERIA_KEYS]

    def to_dict(self) -> Dict[str, Any]:
        """Original row fields overlaid with the coerced canonical fields."""
        data = dict(self.extra)
        data['branch_id'] = self.branch_id
        data['branch_name'] = self.branch_name
        for key in CRITERIA_KEYS:
            data[key] = getattr(self, key)
        return data


BranchInput = Union[BranchRecord, Mapping[str, Any]]


def coerce_branches(branches: Any) -> List[BranchRecord]:
    """
    Validate a branch list and convert every element to a ``BranchRecord``.

    Raises
    ------
    InvalidInput
        If ``branches`` is missing, not a sequence, empty, or holds
        elements that are neither mappings nor records.
    """
    if branches is None:
        raise InvalidInput("Invalid or empty branches data provided")
    if isinstance(branches, pd.DataFrame):
        branches = branches.to_dict(orient='records')
    if isinstance(branches, (str, bytes, Mapping)) or not isinstance(branches, Sequence):
        raise InvalidInput(
            f"Branches data must be a list, got {type(branches).__name__}")
    if len(branches) == 0:
        raise InvalidInput("Invalid or empty branches data provided")

    records = []
    for i, branch in enumerate(branches):
        if isinstance(branch, BranchRecord):
            records.append(branch)
        elif isinstance(branch, Mapping):
            records.append(BranchRecord.from_mapping(branch))
        else:
            raise InvalidInput(
                f"Branch at position {i} must be a mapping, got {type(branch).__name__}")
    return records


def records_from_report_rows(rows: Sequence[Mapping[str, Any]]) -> List[BranchRecord]:
    """
    Convert rows of a generated branch report into records.

    Report rows label branches by location; the location-only label is
    preferred over the full location string.
    """
    records = []
    for row in rows:
        name = _first_present(row, ('branch_location_only', 'branch_location', 'branch_name'))
        records.append(BranchRecord(
            branch_id=_first_present(row, FIELD_ALIASES['branch_id']),
            branch_name='' if name is None else str(name),
            total_savings=row.get('total_savings'),
            total_disbursements=row.get('total_disbursements'),
            net_interest_income=_first_present(row, FIELD_ALIASES['net_interest_income']),
            active_members=row.get('active_members'),
            performance_pct=_first_present(row, FIELD_ALIASES['performance_pct']),
            extra=dict(row),
        ))
    return records


def records_from_frame(df: pd.DataFrame) -> List[BranchRecord]:
    """Convert a DataFrame with one row per branch into records."""
    return [BranchRecord.from_mapping(row) for row in df.to_dict(orient='records')]


def load_branches_csv(path: Union[str, Path], encoding: str = "utf-8") -> List[BranchRecord]:
    """
    Load branch metrics from a CSV file, one branch per row.

    Raises
    ------
    InvalidInput
        If the file is empty, not valid CSV, not in ``encoding``, or has
        no branch name column.
    OSError
        If the file cannot be read.
    """
    path = Path(path)
    logger = get_logger()
    logger.info(f"Loading branches from {path}")

    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False, encoding=encoding)
    except pd.errors.EmptyDataError as e:
        raise InvalidInput(f"{path} is empty") from e
    except pd.errors.ParserError as e:
        raise InvalidInput(f"{path} is not valid CSV: {e}") from e
    except UnicodeDecodeError as e:
        raise InvalidInput(f"{path} is not {encoding} encoded: {e}") from e
    df.columns = [c.strip() for c in df.columns]
    missing_name = not any(c in df.columns for c in FIELD_ALIASES['branch_name'])
    if missing_name:
        raise InvalidInput(f"{path} has no branch name column")

    records = records_from_frame(df)
    logger.info(f"Loaded {len(records)} branches")
    return records


__all__ = [
    'BranchRecord',
    'BranchInput',
    'InvalidInput',
    'FIELD_ALIASES',
    'to_finite_float',
    'coerce_branches',
    'records_from_report_rows',
    'records_from_frame',
    'load_branches_csv',
]
