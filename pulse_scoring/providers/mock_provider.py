"""
Deterministic mock signals for demos and for running without the live data layer.

Every number is derived from (seed, subject_id, key) through its own
random.Random, so results do not depend on call order or process hash
seeds. Each subject gets a stable propensity in [0, 1] (how well it scores
across formulas); signals scatter around it.
"""

from __future__ import annotations

import random

from pulse_scoring.scoring_engine.formulas import FORMULAS, Formula
from pulse_scoring.scoring_engine.signals import Polarity, Signal
from pulse_scoring.scoring_engine.trend import TimePoint, TimeSeries

DEFAULT_SERIES_LENGTH = 8
DEFAULT_SERIES_RANGE = (0.0, 100.0)
SIGNAL_NOISE = 0.12
SERIES_NOISE = 0.05
MAX_WEEKLY_DRIFT = 0.04


def _clamp01(x: float) -> float:
    return min(1.0, max(0.0, x))


def _range_for_key(key: str) -> tuple[float, float]:
    for formula in FORMULAS.values():
        spec = formula.specs.get(key)
        if spec is not None:
            return spec.valid_range
    return DEFAULT_SERIES_RANGE


class MockSignalProvider:
    def __init__(self, seed: int = 42, series_length: int = DEFAULT_SERIES_LENGTH) -> None:
        if series_length < 0:
            raise ValueError(f"series_length must be >= 0, got {series_length}")
        self.seed = seed
        self.series_length = series_length

    def _rng(self, *parts: str) -> random.Random:
        return random.Random(":".join([str(self.seed), *parts]))

    def propensity(self, subject_id: str) -> float:
        """Stable per-subject score tendency in [0, 1]."""
        return self._rng("propensity", subject_id).betavariate(3.0, 2.0)

    def raw_value(self, subject_id: str, formula: Formula, key: str) -> float:
        spec = formula.specs[key]
        lo, hi = spec.valid_range
        rng = self._rng("signal", subject_id, key)
        fraction = _clamp01(self.propensity(subject_id) + rng.gauss(0.0, SIGNAL_NOISE))
        if spec.polarity is Polarity.LOWER_BETTER:
            fraction = 1.0 - fraction
        return round(lo + fraction * (hi - lo), 2)

    def get_signals(self, subject_id: str, formula: Formula) -> list[Signal]:
        return [
            formula.signal(key, self.raw_value(subject_id, formula, key))
            for key in formula.keys
        ]

    def get_series(self, subject_id: str, key: str) -> TimeSeries:
        """Weekly series (timestamps 0..n-1) with a per-subject drift."""
        lo, hi = _range_for_key(key)
        rng = self._rng("series", subject_id, key)
        start = self.propensity(subject_id)
        drift = rng.uniform(-MAX_WEEKLY_DRIFT, MAX_WEEKLY_DRIFT)
        points = []
        for week in range(self.series_length):
            fraction = _clamp01(start + drift * week + rng.gauss(0.0, SERIES_NOISE))
            points.append(TimePoint(week, round(lo + fraction * (hi - lo), 2)))
        return TimeSeries(subject_id, key, tuple(points))

    def subject_ids(self, count: int, prefix: str = "subject") -> list[str]:
        """Stable mock subject ids: subject-001, subject-002, ..."""
        return [f"{prefix}-{i:03d}" for i in range(1, count + 1)]
