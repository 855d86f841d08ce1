"""
Environment variable loading for pulse scoring.

- LOG_LEVEL / LOG_FORMAT: logging (see pulse_logging)
- PULSE_USE_MOCK_DATA: 1 | true | yes | on to score deterministic mock data
- PULSE_MOCK_SEED: integer seed for the mock provider (default 42)
- PULSE_TREND_DEAD_BAND: relative change treated as "stable" (default 0.05)
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is pulse_scoring/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

TRUTHY = ("1", "true", "yes", "on")
DEFAULT_MOCK_SEED = 42
DEFAULT_TREND_DEAD_BAND = 0.05


def load_pulse_env() -> None:
    """Load .env from project root. Safe to call multiple times; never overrides set vars."""
    if _ENV_PATH.is_file():
        load_dotenv(_ENV_PATH, override=False)


def env_flag(name: str, default: bool = False) -> bool:
    """Return True when the variable is one of 1/true/yes/on (case-insensitive)."""
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    return raw in TRUTHY


def env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e
