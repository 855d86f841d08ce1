"""
Provider protocol and the mock-vs-live switch.
"""

from __future__ import annotations

from typing import Mapping, Protocol, runtime_checkable

from pulse_scoring.config import Settings, get_settings
from pulse_scoring.providers.mock_provider import MockSignalProvider
from pulse_scoring.providers.static_provider import StaticSignalProvider
from pulse_scoring.pulse_logging import get_logger
from pulse_scoring.scoring_engine.formulas import Formula
from pulse_scoring.scoring_engine.signals import Signal
from pulse_scoring.scoring_engine.trend import TimeSeries

logger = get_logger(__name__)


@runtime_checkable
class SignalProvider(Protocol):
    def get_signals(self, subject_id: str, formula: Formula) -> list[Signal]:
        """Observed signals for subject_id covering formula's keys (as available)."""
        ...

    def get_series(self, subject_id: str, key: str) -> TimeSeries:
        """Time-ordered raw values of one signal for subject_id."""
        ...


def get_provider(
    settings: Settings | None = None,
    live_values: Mapping[str, Mapping[str, float]] | None = None,
    live_series: Mapping[str, Mapping[str, TimeSeries]] | None = None,
) -> SignalProvider:
    """
    Return the mock provider when settings.use_mock_data, else a static
    provider over the live values the query layer already fetched.
    """
    cfg = settings or get_settings()
    if cfg.use_mock_data:
        logger.info("provider_selected", provider="mock", seed=cfg.mock_seed)
        return MockSignalProvider(seed=cfg.mock_seed)
    logger.info("provider_selected", provider="static", subjects=len(live_values or {}))
    return StaticSignalProvider(live_values or {}, live_series or {})
