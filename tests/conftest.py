"""
Pytest fixtures for pulse scoring tests.
"""

from __future__ import annotations

import pytest

from pulse_scoring.config import get_settings
from pulse_scoring.scoring_engine import Polarity, Signal, WeightTable


@pytest.fixture
def clean_settings(monkeypatch):
    """Clear pulse env vars and the settings cache before and after the test."""
    for name in (
        "LOG_LEVEL",
        "LOG_FORMAT",
        "PULSE_USE_MOCK_DATA",
        "PULSE_MOCK_SEED",
        "PULSE_TREND_DEAD_BAND",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


@pytest.fixture
def wellbeing_signals():
    """Sentiment 5 (1-6), grade 92 (0-100), late submissions 10% (lower is better)."""
    return [
        Signal("sentiment", 5, (1, 6), Polarity.HIGHER_BETTER),
        Signal("grade", 92, (0, 100), Polarity.HIGHER_BETTER),
        Signal("late_submission_rate", 10, (0, 100), Polarity.LOWER_BETTER),
    ]


@pytest.fixture
def wellbeing_table():
    return WeightTable(
        "wellbeing",
        {"sentiment": 0.4, "grade": 0.4, "late_submission_rate": 0.2},
    )
