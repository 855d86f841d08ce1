"""
Alert engine: tier-to-severity mapping, score thresholds, compound risk.

Decides which score records become alerts for the dashboards' alert lists.
Tier labels map to alert severity per formula; a composite below a threshold
raises a "risk_score" alert; a compound cross-risk membership is always
critical. Deduplication is against keys the caller already holds (the core
keeps no alert state).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Collection, Mapping

from pulse_scoring.pulse_logging import get_logger
from pulse_scoring.scoring_engine.cross_risk import CrossRiskMembership
from pulse_scoring.scoring_engine.pipeline import ScoreRecord

logger = get_logger(__name__)

SEVERITY_CRITICAL = "critical"
SEVERITY_HIGH = "high"
SEVERITY_MEDIUM = "medium"
SEVERITY_LOW = "low"
SEVERITY_RISK_SCORE = "risk_score"

SEVERITY_ORDER = (
    SEVERITY_CRITICAL,
    SEVERITY_HIGH,
    SEVERITY_MEDIUM,
    SEVERITY_LOW,
    SEVERITY_RISK_SCORE,
)

# Risk-level tiers (RISK_LEVEL_BANDS / EARLY_WARNING_BANDS) to severity
DEFAULT_TIER_SEVERITY = {
    "Critical": SEVERITY_CRITICAL,
    "High": SEVERITY_HIGH,
    "Intervention Needed": SEVERITY_HIGH,
    "Immediate Support Needed": SEVERITY_HIGH,
    "Struggling": SEVERITY_MEDIUM,
    "Monitor Closely": SEVERITY_MEDIUM,
    "Disengaged": SEVERITY_MEDIUM,
}
MAX_REASON_LENGTH = 500


@dataclass
class AlertConfig:
    """Configurable tier severities and thresholds for the alert engine."""

    tier_severity: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_TIER_SEVERITY))
    """Tier label -> alert severity. Tiers not listed never alert."""
    score_alert_below: float | None = None
    """Raise a risk_score alert when the rounded composite is below this."""
    compound_risk_severity: str = SEVERITY_CRITICAL
    max_reason_length: int = MAX_REASON_LENGTH


@dataclass(frozen=True)
class Alert:
    subject_id: str
    formula_name: str
    severity: str
    reason: str
    score: int
    tier: str

    @property
    def key(self) -> tuple[str, str, str]:
        """Deduplication key: (subject_id, severity, reason)."""
        return (self.subject_id, self.severity, self.reason)

    def to_dict(self) -> dict[str, Any]:
        return {
            "subject_id": self.subject_id,
            "formula_name": self.formula_name,
            "severity": self.severity,
            "reason": self.reason,
            "score": self.score,
            "tier": self.tier,
        }


def _reason_truncate(reason: str, limit: int) -> str:
    if len(reason) <= limit:
        return reason
    return reason[: limit - 3] + "..."


def _severity_rank(severity: str) -> int:
    try:
        return SEVERITY_ORDER.index(severity)
    except ValueError:
        return len(SEVERITY_ORDER)


def evaluate_alerts(
    record: ScoreRecord,
    config: AlertConfig | None = None,
    membership: CrossRiskMembership | None = None,
    recent: Collection[tuple[str, str, str]] = (),
) -> list[Alert]:
    """
    Alerts for one score record, most severe first.

    Args:
        record: Evaluated score for one subject.
        config: Severities and thresholds; defaults if None.
        membership: Optional cross-risk membership for the same subject.
        recent: Alert keys already raised; matching alerts are suppressed.

    Returns:
        New alerts (possibly empty).
    """
    cfg = config or AlertConfig()
    candidates: list[Alert] = []

    def add(severity: str, reason: str) -> None:
        candidates.append(
            Alert(
                subject_id=record.subject_id,
                formula_name=record.formula_name,
                severity=severity,
                reason=_reason_truncate(reason, cfg.max_reason_length),
                score=record.value,
                tier=record.tier,
            )
        )

    # 1. Tier mapped to a severity
    severity = cfg.tier_severity.get(record.tier)
    if severity is not None:
        add(severity, f"{record.formula_name}: tier {record.tier} (score {record.value})")

    # 2. Composite below threshold
    if cfg.score_alert_below is not None and record.value < cfg.score_alert_below:
        add(
            SEVERITY_RISK_SCORE,
            f"{record.formula_name}: score below threshold: "
            f"{record.value} < {cfg.score_alert_below}",
        )

    # 3. Compound cross-risk
    if membership is not None:
        if membership.subject_id != record.subject_id:
            raise ValueError(
                f"Membership for '{membership.subject_id}' does not match record "
                f"for '{record.subject_id}'"
            )
        if membership.is_compound_risk:
            add(
                cfg.compound_risk_severity,
                f"Compound risk: {', '.join(sorted(membership.flags))}",
            )

    seen = set(recent)
    alerts: list[Alert] = []
    for alert in candidates:
        if alert.key in seen:
            continue
        seen.add(alert.key)
        alerts.append(alert)
        logger.info(
            "alert_raised",
            subject_id=alert.subject_id,
            formula=alert.formula_name,
            severity=alert.severity,
            reason=alert.reason,
            score=alert.score,
        )
    alerts.sort(key=lambda a: _severity_rank(a.severity))
    return alerts
