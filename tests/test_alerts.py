"""
Tests for the alert engine.
"""

from __future__ import annotations

import pytest

from pulse_scoring.alerts import AlertConfig, evaluate_alerts
from pulse_scoring.scoring_engine.cross_risk import FLAG_ACADEMIC, FLAG_EMOTIONAL, CrossRiskRule
from pulse_scoring.scoring_engine.formulas import ACADEMIC_RISK, STUDENT_SUCCESS, TEACHER_ENGAGEMENT
from pulse_scoring.scoring_engine.pipeline import evaluate

RULE = CrossRiskRule(frozenset({FLAG_ACADEMIC, FLAG_EMOTIONAL}))


@pytest.fixture
def critical_record():
    """Grade 20, 9 missing assignments, steep decline -> Critical academic risk."""
    return evaluate(ACADEMIC_RISK, "student-007", ACADEMIC_RISK.signals({
        "current_grade": 20,
        "missing_assignments": 9,
        "grade_trend": -2,
    }))


@pytest.fixture
def thriving_record():
    return evaluate(STUDENT_SUCCESS, "student-001", STUDENT_SUCCESS.signals({
        "current_grade": 100,
        "assignment_completion_rate": 100,
        "grade_trend": 2,
        "avg_sentiment": 6,
        "mood_stability": 100,
        "positive_interaction_rate": 100,
    }))


def test_critical_tier_alerts(critical_record):
    assert critical_record.tier == "Critical"
    alerts = evaluate_alerts(critical_record)
    assert len(alerts) == 1
    alert = alerts[0]
    assert alert.severity == "critical"
    assert alert.subject_id == "student-007"
    assert alert.formula_name == "academic_risk"
    assert alert.reason.startswith("academic_risk: tier Critical")
    assert alert.score == critical_record.value
    assert alert.to_dict()["tier"] == "Critical"


def test_thriving_has_no_alerts(thriving_record):
    assert thriving_record.value == 100
    assert thriving_record.tier == "Thriving"
    assert evaluate_alerts(thriving_record) == []


def test_score_threshold():
    record = evaluate(TEACHER_ENGAGEMENT, "teacher-001", TEACHER_ENGAGEMENT.signals({
        "pulse_frequency_score": 25,
        "feedback_frequency_score": 10,
        "response_time_score": 25,
        "platform_activity_score": 5,
    }))
    alerts = evaluate_alerts(record, AlertConfig(score_alert_below=70))
    assert [a.severity for a in alerts] == ["risk_score"]
    assert alerts[0].reason == "teacher_engagement: score below threshold: 65 < 70"
    assert evaluate_alerts(record, AlertConfig(score_alert_below=65)) == []


def test_compound_risk_alert(thriving_record):
    membership = RULE.evaluate("student-001", {FLAG_ACADEMIC, FLAG_EMOTIONAL})
    alerts = evaluate_alerts(thriving_record, membership=membership)
    assert len(alerts) == 1
    assert alerts[0].severity == "critical"
    assert alerts[0].reason == "Compound risk: academic_flag, emotional_flag"


def test_non_compound_membership_is_ignored(thriving_record):
    membership = RULE.evaluate("student-001", {FLAG_ACADEMIC})
    assert evaluate_alerts(thriving_record, membership=membership) == []


def test_membership_must_match_subject(thriving_record):
    membership = RULE.evaluate("student-999", {FLAG_ACADEMIC, FLAG_EMOTIONAL})
    with pytest.raises(ValueError):
        evaluate_alerts(thriving_record, membership=membership)


def test_alerts_sorted_by_severity(critical_record):
    alerts = evaluate_alerts(critical_record, AlertConfig(score_alert_below=95))
    assert [a.severity for a in alerts] == ["critical", "risk_score"]


def test_recent_alerts_suppressed(critical_record):
    first = evaluate_alerts(critical_record)
    assert evaluate_alerts(critical_record, recent=[a.key for a in first]) == []


def test_custom_tier_severity(critical_record):
    config = AlertConfig(tier_severity={"Critical": "high"})
    assert [a.severity for a in evaluate_alerts(critical_record, config)] == ["high"]


def test_reason_truncated(critical_record):
    alerts = evaluate_alerts(critical_record, AlertConfig(max_reason_length=20))
    assert len(alerts[0].reason) == 20
    assert alerts[0].reason.endswith("...")


def test_non_compound_membership_must_match_subject(thriving_record):
    membership = RULE.evaluate("student-999", {FLAG_ACADEMIC})
    with pytest.raises(ValueError):
        evaluate_alerts(thriving_record, membership=membership)
