"""
Tests for cross-risk membership, population percentages, and overlaps.
"""

from __future__ import annotations

import pytest

from pulse_scoring.core.exceptions import PopulationError
from pulse_scoring.scoring_engine.cross_risk import (
    FLAG_ACADEMIC,
    FLAG_DISENGAGED,
    FLAG_EMOTIONAL,
    CrossRiskRule,
    combine,
    flag_from_tier,
    overlap_breakdown,
    percentage,
)

RULE = CrossRiskRule(frozenset({FLAG_ACADEMIC, FLAG_EMOTIONAL}))


def _cohort():
    return [
        RULE.evaluate("s1", {FLAG_ACADEMIC, FLAG_EMOTIONAL}, {"department": "mathematics"}),
        RULE.evaluate("s2", {FLAG_ACADEMIC}, {"department": "mathematics"}),
        RULE.evaluate("s3", set(), {"department": "history"}),
    ]


def test_rule_requires_every_flag():
    assert RULE.evaluate("s", {FLAG_ACADEMIC, FLAG_EMOTIONAL}).is_compound_risk
    assert RULE.evaluate("s", {FLAG_ACADEMIC, FLAG_EMOTIONAL, FLAG_DISENGAGED}).is_compound_risk
    assert not RULE.evaluate("s", {FLAG_EMOTIONAL}).is_compound_risk
    assert not RULE.evaluate("s", []).is_compound_risk


def test_evaluate_flags_mapping():
    m = RULE.evaluate_flags("s", {FLAG_ACADEMIC: True, FLAG_EMOTIONAL: False})
    assert m.flags == frozenset({FLAG_ACADEMIC})
    assert not m.is_compound_risk


def test_rule_needs_flags():
    with pytest.raises(ValueError):
        CrossRiskRule(frozenset())


def test_one_of_three_is_compound():
    """Only one of three subjects has both flags -> 1 and 100/3 %."""
    summary = combine(_cohort(), population=3)
    assert summary.compound_count == 1
    assert summary.compound_percentage == pytest.approx(100 / 3)
    assert summary.compound_subjects == ("s1",)
    assert summary.flag_counts == {FLAG_ACADEMIC: 2, FLAG_EMOTIONAL: 1}
    assert summary.flag_percentages[FLAG_ACADEMIC] == pytest.approx(200 / 3)


def test_population_is_explicit():
    """The denominator is the population passed in, not the number of memberships."""
    summary = combine(_cohort(), population=10)
    assert summary.compound_percentage == pytest.approx(10.0)
    assert summary.population == 10


def test_population_smaller_than_cohort_raises():
    with pytest.raises(PopulationError):
        combine(_cohort(), population=2)


def test_empty_population():
    summary = combine([], population=0)
    assert summary.compound_count == 0
    assert summary.compound_percentage == 0.0


def test_group_breakdown():
    summary = combine(_cohort(), population=3, group_by="department")
    maths = summary.per_group_breakdown["mathematics"]
    assert maths.compound_count == 1
    assert maths.population == 2
    assert maths.compound_percentage == pytest.approx(50.0)
    history = summary.per_group_breakdown["history"]
    assert history.compound_count == 0
    assert history.compound_percentage == 0.0


def test_group_breakdown_with_explicit_populations():
    summary = combine(
        _cohort(),
        population=50,
        group_by="department",
        group_populations={"mathematics": 20, "history": 30, "arts": 5},
    )
    assert summary.per_group_breakdown["mathematics"].compound_percentage == pytest.approx(5.0)
    assert summary.per_group_breakdown["arts"].compound_count == 0
    assert summary.per_group_breakdown["arts"].population == 5


def test_group_population_too_small_raises():
    with pytest.raises(PopulationError):
        combine(_cohort(), population=3, group_by="department", group_populations={"mathematics": 0})


def test_missing_group_attribute():
    summary = combine(_cohort(), population=3, group_by="grade_level")
    assert set(summary.per_group_breakdown) == {"unassigned"}
    assert summary.per_group_breakdown["unassigned"].population == 3


def test_overlap_breakdown():
    memberships = [
        RULE.evaluate("a", {FLAG_ACADEMIC}),
        RULE.evaluate("b", {FLAG_ACADEMIC, FLAG_EMOTIONAL}),
        RULE.evaluate("c", {FLAG_ACADEMIC, FLAG_EMOTIONAL, FLAG_DISENGAGED}),
        RULE.evaluate("d", {FLAG_DISENGAGED}),
        RULE.evaluate("e", set()),
    ]
    regions = overlap_breakdown(memberships, [FLAG_ACADEMIC, FLAG_EMOTIONAL, FLAG_DISENGAGED])
    assert len(regions) == 7
    assert regions[frozenset({FLAG_ACADEMIC})] == 1
    assert regions[frozenset({FLAG_ACADEMIC, FLAG_EMOTIONAL})] == 1
    assert regions[frozenset({FLAG_ACADEMIC, FLAG_EMOTIONAL, FLAG_DISENGAGED})] == 1
    assert regions[frozenset({FLAG_DISENGAGED})] == 1
    assert regions[frozenset({FLAG_EMOTIONAL})] == 0
    assert sum(regions.values()) == 4


def test_flag_from_tier():
    assert flag_from_tier("Critical")
    assert flag_from_tier("High")
    assert not flag_from_tier("Medium")
    assert flag_from_tier("Struggling", {"Struggling", "Intervention Needed"})


def test_percentage():
    assert percentage(1, 4) == 25.0
    assert percentage(0, 0) == 0.0
    with pytest.raises(PopulationError):
        percentage(1, -1)


def test_summary_to_dict():
    d = combine(_cohort(), population=3, group_by="department").to_dict()
    assert d["compound_count"] == 1
    assert d["per_group_breakdown"]["mathematics"]["population"] == 2
    assert d["compound_subjects"] == ["s1"]


def test_group_population_smaller_than_members_raises():
    members = [
        RULE.evaluate("m1", {FLAG_ACADEMIC, FLAG_EMOTIONAL}, {"department": "maths"}),
        RULE.evaluate("m2", {FLAG_ACADEMIC, FLAG_EMOTIONAL}, {"department": "maths"}),
    ]
    with pytest.raises(PopulationError, match="maths"):
        combine(members, population=2, group_by="department", group_populations={"maths": 1})
    summary = combine(members, population=2, group_by="department", group_populations={"maths": 4})
    assert summary.per_group_breakdown["maths"].compound_percentage == pytest.approx(50.0)
