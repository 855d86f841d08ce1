"""
Core utilities — the error hierarchy shared by the scoring engine,
providers, and alerts.
"""

from pulse_scoring.core.exceptions import (
    ConfigurationError,
    DegenerateRangeError,
    InvalidTierBandsError,
    InvalidTimeSeriesError,
    InvalidWeightTableError,
    MissingSignalError,
    PopulationError,
    ProviderError,
    ScoreOutOfRangeError,
    ScoringError,
    SignalError,
    UnknownFormulaError,
)

__all__ = [
    "ConfigurationError",
    "DegenerateRangeError",
    "InvalidTierBandsError",
    "InvalidTimeSeriesError",
    "InvalidWeightTableError",
    "MissingSignalError",
    "PopulationError",
    "ProviderError",
    "ScoreOutOfRangeError",
    "ScoringError",
    "SignalError",
    "UnknownFormulaError",
]
