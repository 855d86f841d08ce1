"""
Application settings.

Typed, frozen settings read from the environment (after .env loading) and
cached for the process. Call get_settings.cache_clear() after changing the
environment (tests do this through a fixture).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from pulse_scoring.config.env import (
    DEFAULT_MOCK_SEED,
    DEFAULT_TREND_DEAD_BAND,
    env_flag,
    env_float,
    env_int,
    load_pulse_env,
)


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    log_format: str = "json"
    use_mock_data: bool = False
    mock_seed: int = DEFAULT_MOCK_SEED
    trend_dead_band: float = DEFAULT_TREND_DEAD_BAND
    """Relative change (fraction) within which a trend is labelled stable."""

    def __post_init__(self) -> None:
        if self.trend_dead_band < 0:
            raise ValueError(f"trend_dead_band must be >= 0, got {self.trend_dead_band}")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return the current application settings.

    Returns:
        Settings with log_level, log_format, use_mock_data, mock_seed,
        trend_dead_band.
    """
    load_pulse_env()
    return Settings(
        log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper(),
        log_format=(os.getenv("LOG_FORMAT") or "json").strip().lower(),
        use_mock_data=env_flag("PULSE_USE_MOCK_DATA"),
        mock_seed=env_int("PULSE_MOCK_SEED", DEFAULT_MOCK_SEED),
        trend_dead_band=env_float("PULSE_TREND_DEAD_BAND", DEFAULT_TREND_DEAD_BAND),
    )
