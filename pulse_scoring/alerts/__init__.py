"""
Alerts — turn score records and cross-risk memberships into alert list entries.
"""

from pulse_scoring.alerts.engine import Alert, AlertConfig, evaluate_alerts

__all__ = ["Alert", "AlertConfig", "evaluate_alerts"]
