"""
Structured logging for pulse scoring.

JSON logs with timestamp, event_type, subject_id, formula.
Use get_logger() in all engine modules for aggregation-friendly output.
"""

from pulse_scoring.pulse_logging.logger import bind_subject, get_logger

__all__ = ["bind_subject", "get_logger"]
