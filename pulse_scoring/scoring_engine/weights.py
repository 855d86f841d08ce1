"""
Weight tables — one named scoring formula's signal weights.

Weights are validated once at construction: non-negative, finite, and summing
to 1.0 within WEIGHT_SUM_TOLERANCE. A table that passes construction can never
fail at call time.
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from pulse_scoring.core.exceptions import InvalidWeightTableError

WEIGHT_SUM_TOLERANCE = 1e-9


@dataclass(frozen=True)
class WeightTable(Mapping):
    """
    Named, read-only mapping of signal key -> weight.

    Example:
        WeightTable("student_success", {"current_grade": 0.3, ...})
    """

    name: str
    weights: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.name:
            raise InvalidWeightTableError("Weight table needs a name")
        weights = {str(k): float(v) for k, v in dict(self.weights).items()}
        if not weights:
            raise InvalidWeightTableError(f"Weight table '{self.name}' has no weights")
        for key, weight in weights.items():
            if not math.isfinite(weight):
                raise InvalidWeightTableError(
                    f"Weight table '{self.name}': weight for '{key}' is not finite ({weight})"
                )
            if weight < 0:
                raise InvalidWeightTableError(
                    f"Weight table '{self.name}': weight for '{key}' is negative ({weight})"
                )
        total = math.fsum(weights.values())
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise InvalidWeightTableError(
                f"Weight table '{self.name}': weights sum to {total!r}, expected 1.0"
            )
        object.__setattr__(self, "weights", MappingProxyType(weights))

    def __getitem__(self, key: str) -> float:
        return self.weights[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.weights)

    def __len__(self) -> int:
        return len(self.weights)

    def __hash__(self) -> int:
        return hash((self.name, tuple(sorted(self.weights.items()))))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WeightTable):
            return NotImplemented
        return self.name == other.name and dict(self.weights) == dict(other.weights)

    @classmethod
    def equal(cls, name: str, keys: list[str] | tuple[str, ...]) -> WeightTable:
        """Equal weight for every key (e.g. four 0–25 sub-scores summed to 0–100)."""
        if not keys:
            raise InvalidWeightTableError(f"Weight table '{name}' has no weights")
        share = 1.0 / len(keys)
        return cls(name, {k: share for k in keys})
