"""
Signal normalization — raw metrics onto a common 0–1 scale.

Each raw metric (sentiment 1–6, grade 0–100, rate 0–100%, logins per week)
is declared with a valid range and a polarity. Normalization is linear over
the declared range, flipped for lower-is-better signals, and clamped to [0, 1].
Out-of-range input is clamped and reported as a RangeWarning, never silently.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pulse_scoring.core.exceptions import DegenerateRangeError, SignalError
from pulse_scoring.pulse_logging import get_logger

logger = get_logger(__name__)


class Polarity(str, Enum):
    """Direction in which a signal raises the composite it feeds."""

    HIGHER_BETTER = "higher_better"
    LOWER_BETTER = "lower_better"


def _check_range(key: str, valid_range: tuple[float, float]) -> tuple[float, float]:
    lo, hi = float(valid_range[0]), float(valid_range[1])
    if not (math.isfinite(lo) and math.isfinite(hi)) or hi <= lo:
        raise DegenerateRangeError(key, (lo, hi))
    return lo, hi


@dataclass(frozen=True)
class SignalSpec:
    """
    Declared shape of one signal: key, valid range, polarity.

    Specs are static configuration owned by a Formula; observe() turns a raw
    value into a Signal.
    """

    key: str
    valid_range: tuple[float, float]
    polarity: Polarity = Polarity.HIGHER_BETTER

    def __post_init__(self) -> None:
        object.__setattr__(self, "valid_range", _check_range(self.key, self.valid_range))
        object.__setattr__(self, "polarity", Polarity(self.polarity))

    def observe(self, raw_value: float) -> Signal:
        return Signal(
            key=self.key,
            raw_value=raw_value,
            valid_range=self.valid_range,
            polarity=self.polarity,
        )


@dataclass(frozen=True)
class Signal:
    """One immutable observation of a raw, bounded metric about a subject."""

    key: str
    raw_value: float
    valid_range: tuple[float, float]
    polarity: Polarity = Polarity.HIGHER_BETTER

    def __post_init__(self) -> None:
        object.__setattr__(self, "valid_range", tuple(self.valid_range))
        object.__setattr__(self, "polarity", Polarity(self.polarity))

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "raw_value": self.raw_value,
            "valid_range": list(self.valid_range),
            "polarity": self.polarity.value,
        }


@dataclass(frozen=True)
class RangeWarning:
    """
    A raw value fell outside its declared range and was clamped.

    Likely an upstream data issue; callers surface or log it.
    """

    key: str
    raw_value: float
    valid_range: tuple[float, float]
    clamped_to: float
    """The bound the raw value was clamped to."""

    @property
    def message(self) -> str:
        lo, hi = self.valid_range
        return (
            f"Signal '{self.key}' raw value {self.raw_value} outside "
            f"declared range {lo}..{hi}; clamped to {self.clamped_to}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "raw_value": self.raw_value,
            "valid_range": list(self.valid_range),
            "clamped_to": self.clamped_to,
            "message": self.message,
        }


@dataclass(frozen=True)
class NormalizedSignal:
    key: str
    value: float
    """Normalized value in [0, 1], polarity already applied."""
    warning: RangeWarning | None = None

    @property
    def was_clamped(self) -> bool:
        return self.warning is not None


def normalize_signal(signal: Signal) -> NormalizedSignal:
    """
    Normalize one signal to [0, 1] and report clamping.

    higher_better: clamp((raw - min) / (max - min), 0, 1)
    lower_better:  1 - clamp((raw - min) / (max - min), 0, 1)

    Raises:
        DegenerateRangeError: max <= min (never divides by zero).
        SignalError: raw value is NaN or infinite.
    """
    lo, hi = _check_range(signal.key, signal.valid_range)
    raw = float(signal.raw_value)
    if not math.isfinite(raw):
        raise SignalError(f"Signal '{signal.key}' has a non-finite raw value {raw}")

    warning = None
    if raw < lo or raw > hi:
        bound = lo if raw < lo else hi
        warning = RangeWarning(
            key=signal.key,
            raw_value=raw,
            valid_range=(lo, hi),
            clamped_to=bound,
        )
        logger.warning(
            "signal_out_of_range",
            key=signal.key,
            raw_value=raw,
            valid_range=[lo, hi],
            clamped_to=bound,
        )

    fraction = min(1.0, max(0.0, (raw - lo) / (hi - lo)))
    if signal.polarity is Polarity.LOWER_BETTER:
        fraction = 1.0 - fraction
    return NormalizedSignal(key=signal.key, value=fraction, warning=warning)


def normalize(signal: Signal) -> float:
    """Return the signal's normalized value in [0, 1]. See normalize_signal()."""
    return normalize_signal(signal).value
