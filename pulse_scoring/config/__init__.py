"""
Configuration for the pulse scoring shell.

Loads settings from environment variables and an optional .env file.
Weight tables and tier bands are not configuration here; they are static
data in scoring_engine.formulas.
"""

from pulse_scoring.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings"]
