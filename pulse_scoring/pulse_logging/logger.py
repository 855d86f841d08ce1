"""
Structured logs for the scoring engine, alerts, and tools.

Every entry carries an ISO 8601 timestamp, its level, an event_type (the
first positional argument), the emitting module under "logger", and the
scoring context the caller passes (subject_id, formula, value, tier, ...).

Level and renderer come from Settings (LOG_LEVEL / LOG_FORMAT, .env
included), read when this module is first imported. Output goes to stderr
so score_report can print JSON on stdout.

Imports only pulse_scoring.config, which never logs.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

from pulse_scoring.config import get_settings

RENDER_JSON = "json"


def _level_value(level: str | int) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, level.strip().upper(), logging.INFO)


def _stamp_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Add a UTC timestamp and rename structlog's 'event' to event_type."""
    event_dict.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    return event_dict


def _processors(fmt: str) -> list[Any]:
    renderer: Any
    if fmt == RENDER_JSON:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty(),
            event_key="event_type",
        )
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.format_exc_info,
        _stamp_event,
        renderer,
    ]


def configure_structlog(level: str | int | None = None, fmt: str | None = None) -> None:
    """
    (Re)configure structlog.

    Args:
        level: Level name or number; Settings.log_level when None.
        fmt: "json" or anything else for the console renderer;
            Settings.log_format when None.

    Loggers already bound by get_logger() keep the configuration they were
    created under.
    """
    if level is None or fmt is None:
        settings = get_settings()
        level = settings.log_level if level is None else level
        fmt = settings.log_format if fmt is None else fmt
    structlog.configure(
        processors=_processors(fmt.strip().lower()),
        wrapper_class=structlog.make_filtering_bound_logger(_level_value(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Logger for one module, with the module name bound as "logger".

        logger = get_logger(__name__)
        logger.info("composite_computed", subject_id="s-001", formula="student_success", value=87)
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_subject(subject_id: str) -> structlog.BoundLogger:
    """Logger with subject_id bound to every entry."""
    return get_logger("pulse_scoring").bind(subject_id=subject_id)
