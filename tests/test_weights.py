"""
Tests for weight table validation.
"""

from __future__ import annotations

import math

import pytest

from pulse_scoring.core.exceptions import InvalidWeightTableError
from pulse_scoring.scoring_engine.formulas import FORMULAS
from pulse_scoring.scoring_engine.weights import WEIGHT_SUM_TOLERANCE, WeightTable


def test_valid_table_is_a_mapping(wellbeing_table):
    assert wellbeing_table.name == "wellbeing"
    assert wellbeing_table["sentiment"] == 0.4
    assert len(wellbeing_table) == 3
    assert set(wellbeing_table) == {"sentiment", "grade", "late_submission_rate"}
    assert "grade" in wellbeing_table


@pytest.mark.parametrize("weights", [
    {"a": 0.5, "b": 0.4},
    {"a": 0.6, "b": 0.5},
    {"a": 0.3, "b": 0.3, "c": 0.3},
])
def test_weights_must_sum_to_one(weights):
    """0.9 or 1.1 total raises at construction."""
    with pytest.raises(InvalidWeightTableError):
        WeightTable("bad", weights)


def test_tolerance_accepts_float_noise():
    WeightTable("noisy", {"a": 0.1, "b": 0.2, "c": 0.7 + WEIGHT_SUM_TOLERANCE / 10})


def test_negative_weight_raises():
    with pytest.raises(InvalidWeightTableError):
        WeightTable("neg", {"a": 1.2, "b": -0.2})


def test_non_finite_weight_raises():
    with pytest.raises(InvalidWeightTableError):
        WeightTable("nan", {"a": math.nan, "b": 1.0})


def test_empty_table_raises():
    with pytest.raises(InvalidWeightTableError):
        WeightTable("empty", {})
    with pytest.raises(InvalidWeightTableError):
        WeightTable("", {"a": 1.0})


def test_zero_weight_is_allowed():
    table = WeightTable("zero", {"a": 1.0, "b": 0.0})
    assert table["b"] == 0.0


def test_table_is_read_only(wellbeing_table):
    with pytest.raises(TypeError):
        wellbeing_table.weights["grade"] = 0.9


def test_equal_weights():
    table = WeightTable.equal("engagement", ["p", "f", "r", "a"])
    assert all(w == 0.25 for w in table.values())
    with pytest.raises(InvalidWeightTableError):
        WeightTable.equal("none", [])


def test_equality_and_hash():
    a = WeightTable("t", {"x": 0.5, "y": 0.5})
    b = WeightTable("t", {"y": 0.5, "x": 0.5})
    assert a == b
    assert hash(a) == hash(b)
    assert a != WeightTable("u", {"x": 0.5, "y": 0.5})


def test_catalog_weights_sum_to_one():
    """Every built-in formula's weights sum to 1.0 within tolerance."""
    for formula in FORMULAS.values():
        assert math.fsum(formula.table.values()) == pytest.approx(1.0, abs=WEIGHT_SUM_TOLERANCE)
