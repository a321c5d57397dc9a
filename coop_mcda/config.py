# -*- coding: utf-8 -*-
"""Configuration management for branch performance ranking."""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple
from enum import Enum
import json
import math


# Tolerance applied when checking that criterion weights sum to 1.0
WEIGHT_SUM_TOLERANCE = 0.01


class InvalidWeights(ValueError):
    """Raised when a weight update would leave the criteria inconsistent."""


class Direction(Enum):
    """Preference direction of a criterion."""
    BENEFIT = "benefit"
    COST = "cost"


class Category(Enum):
    """Performance category assigned from a TOPSIS score."""
    EXCELLENT = "Excellent"
    GOOD = "Good"
    NEEDS_IMPROVEMENT = "Needs Improvement"


@dataclass(frozen=True)
class CriterionSpec:
    """One scoring criterion: the record field, its direction and weight."""
    key: str
    direction: Direction
    weight: float

    @property
    def is_benefit(self) -> bool:
        return self.direction is Direction.BENEFIT

    def to_dict(self) -> Dict:
        return {'type': self.direction.value, 'weight': self.weight}


DEFAULT_CRITERIA: Tuple[CriterionSpec, ...] = (
    CriterionSpec('total_savings', Direction.BENEFIT, 0.25),
    CriterionSpec('total_disbursements', Direction.COST, 0.20),
    CriterionSpec('net_interest_income', Direction.BENEFIT, 0.30),
    CriterionSpec('active_members', Direction.BENEFIT, 0.15),
    CriterionSpec('performance_pct', Direction.BENEFIT, 0.10),
)

CRITERIA_KEYS: Tuple[str, ...] = tuple(c.key for c in DEFAULT_CRITERIA)


@dataclass(frozen=True)
class CriteriaConfig:
    """
    Immutable set of the five scoring criteria.

    Column order of every decision matrix follows ``criteria``.
    Updates go through :meth:`with_weights`, which validates the merged
    weight set before returning a new instance.
    """
    criteria: Tuple[CriterionSpec, ...] = DEFAULT_CRITERIA

    @property
    def keys(self) -> List[str]:
        return [c.key for c in self.criteria]

    @property
    def weights(self) -> Dict[str, float]:
        return {c.key: c.weight for c in self.criteria}

    @property
    def cost_criteria(self) -> List[str]:
        return [c.key for c in self.criteria if not c.is_benefit]

    @property
    def benefit_criteria(self) -> List[str]:
        return [c.key for c in self.criteria if c.is_benefit]

    def get(self, key: str) -> CriterionSpec:
        for c in self.criteria:
            if c.key == key:
                return c
        raise KeyError(key)

    def with_weights(self, new_weights: Mapping[str, float]) -> 'CriteriaConfig':
        """
        Return a copy with ``new_weights`` merged over the current weights.

        Parameters
        ----------
        new_weights : Mapping[str, float]
            Partial or complete mapping of criterion key to weight.

        Raises
        ------
        InvalidWeights
            If a key is unknown, a weight is not a finite number in [0, 1],
            or the merged weights do not sum to 1.0 within tolerance.
        """
        if not isinstance(new_weights, Mapping):
            raise InvalidWeights(
                f"Weights must be a mapping, got {type(new_weights).__name__}")

        unknown = sorted(set(new_weights) - set(self.keys))
        if unknown:
            raise InvalidWeights(f"Unknown criteria: {unknown}")

        merged = self.weights
        for key, value in new_weights.items():
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidWeights(f"Weight for {key} must be a number, got {value!r}")
            value = float(value)
            if not math.isfinite(value) or value < 0 or value > 1:
                raise InvalidWeights(f"Weight for {key} must be within [0, 1], got {value}")
            merged[key] = value

        total = sum(merged.values())
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise InvalidWeights(f"Weights must sum to 1.0 (got {total:.4f})")

        return CriteriaConfig(criteria=tuple(
            replace(c, weight=merged[c.key]) for c in self.criteria
        ))

    def to_dict(self) -> Dict:
        return {
            'criteria': {c.key: c.to_dict() for c in self.criteria},
            'weights': self.weights,
        }


@dataclass(frozen=True)
class CategoryThresholds:
    """Score thresholds separating the performance categories."""
    excellent: float = 0.75
    good: float = 0.50

    def categorize(self, score: float) -> Category:
        if score >= self.excellent:
            return Category.EXCELLENT
        if score >= self.good:
            return Category.GOOD
        return Category.NEEDS_IMPROVEMENT


@dataclass
class SensitivityConfig:
    """Monte Carlo weight perturbation settings."""
    n_simulations: int = 500
    perturbation_range: float = 0.2
    seed: int = 42
    top_n: List[int] = field(default_factory=lambda: [1, 3, 5])


@dataclass
class PathConfig:
    """Where a run writes its results, figures and reports."""
    output_dir: Path = field(default_factory=lambda: Path("outputs"))


@dataclass
class LoggingConfig:
    """Logger settings for command-line runs."""
    level: str = "INFO"
    log_file: Optional[str] = None
    use_colors: bool = True


@dataclass
class Config:
    """Main configuration container."""
    criteria: CriteriaConfig = field(default_factory=CriteriaConfig)
    thresholds: CategoryThresholds = field(default_factory=CategoryThresholds)
    sensitivity: SensitivityConfig = field(default_factory=SensitivityConfig)
    paths: PathConfig = field(default_factory=PathConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self) -> Dict:
        def _to_dict(obj):
            if isinstance(obj, CriteriaConfig):
                return obj.to_dict()
            elif hasattr(obj, '__dataclass_fields__'):
                return {k: _to_dict(v) for k, v in obj.__dict__.items()}
            elif isinstance(obj, Enum):
                return obj.value
            elif isinstance(obj, Path):
                return str(obj)
            elif isinstance(obj, (list, tuple)):
                return [_to_dict(i) for i in obj]
            elif isinstance(obj, dict):
                return {k: _to_dict(v) for k, v in obj.items()}
            return obj
        return _to_dict(self)

    def save(self, filepath: Path) -> None:
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: Path) -> 'Config':
        """Build a configuration from a JSON file written by :meth:`save`."""
        with open(filepath) as f:
            data = json.load(f)

        config = cls()
        weights = data.get('criteria', {}).get('weights')
        if weights:
            config.criteria = config.criteria.with_weights(weights)
        if 'thresholds' in data:
            config.thresholds = CategoryThresholds(**data['thresholds'])
        if 'sensitivity' in data:
            config.sensitivity = SensitivityConfig(**data['sensitivity'])
        if 'paths' in data:
            config.paths = PathConfig(output_dir=Path(data['paths']['output_dir']))
        if 'logging' in data:
            config.logging = LoggingConfig(**data['logging'])
        return config

    def summary(self) -> str:
        weights = "\n".join(
            f"  {c.key:<22} {c.direction.value:<8} {c.weight:.2f}"
            for c in self.criteria.criteria
        )
        return f"""
{'='*60}
CONFIGURATION SUMMARY - Branch TOPSIS Ranking
{'='*60}

CRITERIA:
{weights}

CATEGORIES:
  Excellent: score >= {self.thresholds.excellent:.2f}
  Good: score >= {self.thresholds.good:.2f}

SENSITIVITY:
  Simulations: {self.sensitivity.n_simulations}
  Perturbation range: ±{self.sensitivity.perturbation_range:.0%}

OUTPUT:
  Directory: {self.paths.output_dir}
  Log level: {self.logging.level}
{'='*60}
"""


_config: Optional[Config] = None

def get_config() -> Config:
    global _config
    if _config is None:
        _config = Config()
    return _config

def get_default_config() -> Config:
    """Get a fresh default configuration."""
    return Config()

def set_config(config: Config) -> None:
    global _config
    _config = config

def reset_config() -> None:
    global _config
    _config = Config()
