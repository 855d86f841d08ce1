"""
Static provider over values already fetched by the data layer.

A subject or key with no value yields no signal; the composite then raises
MissingSignalError. Nothing is defaulted.
"""

from __future__ import annotations

from typing import Mapping

from pulse_scoring.core.exceptions import ProviderError
from pulse_scoring.scoring_engine.formulas import Formula
from pulse_scoring.scoring_engine.signals import Signal
from pulse_scoring.scoring_engine.trend import TimeSeries


class StaticSignalProvider:
    def __init__(
        self,
        values: Mapping[str, Mapping[str, float]],
        series: Mapping[str, Mapping[str, TimeSeries]] | None = None,
    ) -> None:
        self._values = {sid: dict(raw) for sid, raw in values.items()}
        self._series = {sid: dict(s) for sid, s in (series or {}).items()}

    @property
    def subject_ids(self) -> list[str]:
        return list(self._values)

    def get_signals(self, subject_id: str, formula: Formula) -> list[Signal]:
        raw = self._values.get(subject_id, {})
        return [formula.signal(key, raw[key]) for key in formula.keys if raw.get(key) is not None]

    def get_series(self, subject_id: str, key: str) -> TimeSeries:
        try:
            return self._series[subject_id][key]
        except KeyError:
            raise ProviderError(f"No series '{key}' for subject '{subject_id}'") from None
