"""
Test that pulse_logging can be imported without circular import and logger works.
"""

from __future__ import annotations

import os

import pytest
import structlog
import structlog.testing

from pulse_scoring.config import env, get_settings
from pulse_scoring.pulse_logging.logger import configure_structlog


def test_logging_import():
    """Import get_logger from pulse_logging and use the logger."""
    from pulse_scoring.pulse_logging import get_logger

    logger = get_logger("test")
    assert logger is not None
    assert hasattr(logger, "info")
    assert hasattr(logger, "debug")
    assert hasattr(logger, "warning")
    assert hasattr(logger, "error")
    # Smoke test: call info (should not raise)
    logger.info("test_message", key="value")


def test_bind_subject():
    """bind_subject returns a usable logger."""
    from pulse_scoring.pulse_logging import bind_subject

    logger = bind_subject("student-001")
    logger.debug("subject_bound", formula="student_success")


@pytest.fixture
def restore_structlog():
    """Put back the structlog configuration a test replaces."""
    saved = structlog.get_config()
    yield
    structlog.configure(**saved)


def _events_logged():
    fresh = structlog.get_logger("pulse_scoring.test")
    with structlog.testing.capture_logs() as logs:
        fresh.warning("range_warning")
        fresh.error("provider_failed")
    return [entry["event"] for entry in logs]


def test_level_from_settings(clean_settings, restore_structlog):
    """LOG_LEVEL read through Settings sets the minimum level."""
    clean_settings.setenv("LOG_LEVEL", "ERROR")
    configure_structlog()
    assert _events_logged() == ["provider_failed"]


def test_level_from_dotenv(clean_settings, restore_structlog, tmp_path):
    """A LOG_LEVEL in .env reaches logging."""
    env_file = tmp_path / ".env"
    env_file.write_text("LOG_LEVEL=ERROR\n")
    clean_settings.setattr(env, "_ENV_PATH", env_file)
    try:
        configure_structlog()
        assert get_settings().log_level == "ERROR"
        assert _events_logged() == ["provider_failed"]
    finally:
        os.environ.pop("LOG_LEVEL", None)


def test_explicit_level_wins(clean_settings, restore_structlog):
    clean_settings.setenv("LOG_LEVEL", "ERROR")
    configure_structlog(level="WARNING", fmt="console")
    assert _events_logged() == ["range_warning", "provider_failed"]
