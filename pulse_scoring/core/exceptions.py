"""
Application-level exceptions.

Every error raised by the scoring engine derives from ScoringError so callers
(the dashboard's query layer) can catch one type and show "data unavailable"
instead of a zero score. Each error keeps the offending context as attributes.
"""

from __future__ import annotations

from typing import Iterable


class ScoringError(Exception):
    """Base class for all pulse scoring errors."""


class SignalError(ScoringError):
    """A signal cannot be used for a composite."""


class ConfigurationError(ScoringError):
    """A weight table, band set, or formula is invalid. Raised at construction."""


class DegenerateRangeError(SignalError):
    """A signal's declared [min, max] collapses to a point (or is inverted)."""

    def __init__(self, key: str, valid_range: tuple[float, float]) -> None:
        self.key = key
        self.valid_range = valid_range
        super().__init__(
            f"Signal '{key}' has a degenerate range {valid_range[0]}..{valid_range[1]}"
        )


class MissingSignalError(SignalError):
    """A weight table references signal keys absent from the supplied signals."""

    def __init__(self, formula_name: str, missing_keys: Iterable[str]) -> None:
        self.formula_name = formula_name
        self.missing_keys = tuple(sorted(missing_keys))
        super().__init__(
            f"Formula '{formula_name}' is missing signals: {', '.join(self.missing_keys)}"
        )


class InvalidWeightTableError(ConfigurationError):
    """Weights do not sum to 1.0, are negative, or do not match the signal specs."""


class InvalidTierBandsError(ConfigurationError):
    """Bands are non-monotonic, overlapping, or leave a gap in their domain."""


class UnknownFormulaError(ConfigurationError, KeyError):
    """No formula is registered under the requested name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown formula '{name}'")

    def __str__(self) -> str:
        return self.args[0]


class ScoreOutOfRangeError(ScoringError, ValueError):
    """A score handed to classify() lies outside the band set's domain."""

    def __init__(self, score: float, lower: float, upper: float) -> None:
        self.score = score
        self.lower = lower
        self.upper = upper
        super().__init__(f"Score {score} is outside the band domain [{lower}, {upper}]")


class InvalidTimeSeriesError(ScoringError, ValueError):
    """Time series points are out of order or carry a non-finite value."""


class PopulationError(ScoringError, ValueError):
    """A population denominator is negative or smaller than the supplied cohort."""


class ProviderError(ScoringError):
    """A signal provider cannot supply the requested data."""
