"""
Trend and stability over a time-ordered series of raw values.

Direction compares the mean of the most recent third of the series with the
mean of the earliest third: a relative change within the dead-band (default
5%) is "stable", otherwise "increasing" or "decreasing" by sign. Slope is the
least-squares slope per observation step.

Stability is the population standard deviation of the raw series, labelled
through a TierBands set (STABILITY_BANDS by default), so stability labels use
the same classifier as every score.

Fewer than two points cannot show a trend: direction "stable", slope 0,
standard deviation 0. All deterministic; no clock reads.
"""

from __future__ import annotations

import math
import statistics
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Sequence, Union

from pulse_scoring.core.exceptions import InvalidTimeSeriesError
from pulse_scoring.pulse_logging import get_logger
from pulse_scoring.scoring_engine.tiers import TierBands

logger = get_logger(__name__)

TREND_INCREASING = "increasing"
TREND_DECREASING = "decreasing"
TREND_STABLE = "stable"

DEFAULT_DEAD_BAND = 0.05
MIN_POINTS_FOR_TREND = 2

STABILITY_BANDS = TierBands.from_cutoffs(
    ["Very Stable", "Stable", "Moderate", "Volatile", "Very Volatile"],
    [0.5, 1.0, 1.5, 2.0],
    upper=math.inf,
    name="stability",
)

# |slope| above 0.5 is moderate, above 2.0 strong; the cutoffs themselves stay
# in the lower band.
TREND_STRENGTH_BANDS = TierBands.from_cutoffs(
    ["weak", "moderate", "strong"],
    [math.nextafter(0.5, math.inf), math.nextafter(2.0, math.inf)],
    upper=math.inf,
    name="trend_strength",
)

Timestamp = Union[int, float, date, datetime, str]


@dataclass(frozen=True)
class TimePoint:
    timestamp: Timestamp
    value: float


@dataclass(frozen=True)
class TimeSeries:
    """
    Append-only, time-ordered values for one subject and signal.

    Timestamps must be non-decreasing (any mutually comparable type: epoch
    seconds, dates, ISO strings). append() returns a new series.
    """

    subject_id: str
    key: str
    points: tuple[TimePoint, ...] = ()

    def __post_init__(self) -> None:
        points = tuple(
            p if isinstance(p, TimePoint) else TimePoint(*p) for p in self.points
        )
        for point in points:
            if not math.isfinite(float(point.value)):
                raise InvalidTimeSeriesError(
                    f"Series '{self.key}' for '{self.subject_id}' has non-finite value {point.value}"
                )
        for prev, point in zip(points, points[1:]):
            try:
                out_of_order = point.timestamp < prev.timestamp
            except TypeError as e:
                raise InvalidTimeSeriesError(
                    f"Series '{self.key}' mixes incomparable timestamps"
                ) from e
            if out_of_order:
                raise InvalidTimeSeriesError(
                    f"Series '{self.key}' for '{self.subject_id}' is not time-ordered: "
                    f"{point.timestamp!r} after {prev.timestamp!r}"
                )
        object.__setattr__(self, "points", points)

    @classmethod
    def from_values(
        cls,
        values: Iterable[float],
        *,
        subject_id: str = "",
        key: str = "",
    ) -> TimeSeries:
        """Series with integer timestamps 0..n-1 (e.g. consecutive weeks)."""
        return cls(subject_id, key, tuple(TimePoint(i, float(v)) for i, v in enumerate(values)))

    def append(self, timestamp: Timestamp, value: float) -> TimeSeries:
        return TimeSeries(self.subject_id, self.key, self.points + (TimePoint(timestamp, value),))

    @property
    def values(self) -> list[float]:
        return [float(p.value) for p in self.points]

    def __len__(self) -> int:
        return len(self.points)


@dataclass(frozen=True)
class TrendResult:
    direction: str
    slope: float
    """Least-squares slope in value units per observation."""
    relative_change: float
    """(recent_mean - early_mean) / |early_mean|; 0 with fewer than two points."""
    strength: str
    points: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "direction": self.direction,
            "slope": self.slope,
            "relative_change": self.relative_change,
            "strength": self.strength,
            "points": self.points,
        }


@dataclass(frozen=True)
class StabilityResult:
    std_dev: float
    label: str
    points: int

    def to_dict(self) -> dict[str, Any]:
        return {"std_dev": self.std_dev, "label": self.label, "points": self.points}


def linear_slope(values: Sequence[float]) -> float:
    """Least-squares slope of values against their index; 0 for fewer than two points."""
    n = len(values)
    if n < MIN_POINTS_FOR_TREND:
        return 0.0
    mean_x = (n - 1) / 2.0
    mean_y = math.fsum(values) / n
    numerator = math.fsum((i - mean_x) * (y - mean_y) for i, y in enumerate(values))
    denominator = math.fsum((i - mean_x) ** 2 for i in range(n))
    return numerator / denominator


def _relative_change(early: float, recent: float) -> float:
    delta = recent - early
    if early == 0:
        if delta == 0:
            return 0.0
        return math.copysign(math.inf, delta)
    return delta / abs(early)


def estimate_trend(
    series: TimeSeries,
    *,
    dead_band: float = DEFAULT_DEAD_BAND,
    strength_bands: TierBands = TREND_STRENGTH_BANDS,
) -> TrendResult:
    """
    Direction and slope of a series.

    Compares the mean of the last third against the mean of the first third
    (at least one point each). |relative change| <= dead_band is "stable".

    Args:
        series: Time-ordered raw values.
        dead_band: Relative change treated as no change (0.05 = 5%).
        strength_bands: Labels for |slope|.
    """
    if dead_band < 0:
        raise ValueError(f"dead_band must be >= 0, got {dead_band}")
    values = series.values
    n = len(values)
    if n < MIN_POINTS_FOR_TREND:
        return TrendResult(
            direction=TREND_STABLE,
            slope=0.0,
            relative_change=0.0,
            strength=strength_bands.classify(0.0),
            points=n,
        )

    third = max(1, n // 3)
    early_mean = statistics.fmean(values[:third])
    recent_mean = statistics.fmean(values[-third:])
    change = _relative_change(early_mean, recent_mean)

    if abs(change) <= dead_band:
        direction = TREND_STABLE
    elif change > 0:
        direction = TREND_INCREASING
    else:
        direction = TREND_DECREASING

    slope = linear_slope(values)
    result = TrendResult(
        direction=direction,
        slope=slope,
        relative_change=change,
        strength=strength_bands.classify(abs(slope)),
        points=n,
    )
    logger.debug(
        "trend_estimated",
        subject_id=series.subject_id,
        key=series.key,
        direction=direction,
        slope=round(slope, 4),
        points=n,
    )
    return result


def estimate_stability(
    series: TimeSeries,
    *,
    bands: TierBands = STABILITY_BANDS,
) -> StabilityResult:
    """
    Population standard deviation of the raw series and its stability label.

    Fewer than two points give std_dev 0 (the bottom band's label).
    """
    values = series.values
    n = len(values)
    std_dev = statistics.pstdev(values) if n >= MIN_POINTS_FOR_TREND else 0.0
    label = bands.classify(std_dev)
    logger.debug(
        "stability_estimated",
        subject_id=series.subject_id,
        key=series.key,
        std_dev=round(std_dev, 4),
        label=label,
        points=n,
    )
    return StabilityResult(std_dev=std_dev, label=label, points=n)
