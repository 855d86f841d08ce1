"""
Weighted composite computation — normalized signals into one 0–100 score.

value = round_half_up(100 * sum(weight_i * normalize(signal_i)))

Every weight-table key must have a matching signal; a missing signal raises
MissingSignalError rather than defaulting, so partial data is never dressed
up as a valid score. The per-signal contribution is kept in
component_breakdown so a view can show which factor pulled the score down.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable

from pulse_scoring.core.exceptions import MissingSignalError, SignalError
from pulse_scoring.pulse_logging import get_logger
from pulse_scoring.scoring_engine.signals import RangeWarning, Signal, normalize_signal
from pulse_scoring.scoring_engine.weights import WeightTable

logger = get_logger(__name__)

SCORE_MIN = 0.0
SCORE_MAX = 100.0
# Float noise (e.g. 64.99999999999999) is removed before half-up rounding
_ROUNDING_GUARD_DIGITS = 9


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (86.5 -> 87, not 86)."""
    if not math.isfinite(value):
        raise ValueError(f"Cannot round non-finite value {value}")
    cleaned = Decimal(repr(round(value, _ROUNDING_GUARD_DIGITS)))
    return int(cleaned.quantize(Decimal(1), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class CompositeScore:
    """
    One subject's composite under one formula.

    value is the rounded display score; unrounded_value keeps full precision
    for trend math. component_breakdown maps signal key -> contribution in
    score points; contributions sum to unrounded_value.
    """

    subject_id: str
    formula_name: str
    value: int
    unrounded_value: float
    component_breakdown: dict[str, float] = field(default_factory=dict)
    normalized: dict[str, float] = field(default_factory=dict)
    """Normalized (0–1) value per signal, polarity applied."""
    warnings: tuple[RangeWarning, ...] = ()

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def weakest_components(self, table: WeightTable, limit: int = 3) -> list[str]:
        """
        Signal keys ordered by points lost against their weight (largest loss first).

        Loss for key k is 100 * weight_k - contribution_k. Keys that lost nothing
        are omitted.
        """
        losses = []
        for key, weight in table.items():
            lost = SCORE_MAX * weight - self.component_breakdown.get(key, 0.0)
            if lost > 1e-9:
                losses.append((lost, key))
        losses.sort(key=lambda item: (-item[0], item[1]))
        return [key for _, key in losses[:limit]]

    def to_dict(self) -> dict[str, Any]:
        return {
            "subject_id": self.subject_id,
            "formula_name": self.formula_name,
            "value": self.value,
            "unrounded_value": self.unrounded_value,
            "component_breakdown": dict(self.component_breakdown),
            "normalized": dict(self.normalized),
            "warnings": [w.to_dict() for w in self.warnings],
        }


def _index_signals(signals: Iterable[Signal]) -> dict[str, Signal]:
    by_key: dict[str, Signal] = {}
    for signal in signals:
        if signal.key in by_key:
            raise SignalError(f"Duplicate signal '{signal.key}' supplied")
        by_key[signal.key] = signal
    return by_key


def compute_composite(
    signals: Iterable[Signal],
    table: WeightTable,
    *,
    subject_id: str = "",
) -> CompositeScore:
    """
    Combine normalized signals with a weight table into a 0–100 composite.

    Signals whose key is not in the table are ignored. No partial result is
    ever returned: either the full CompositeScore or an error.

    Args:
        signals: Observed signals for one subject.
        table: Weight table defining the formula.
        subject_id: Carried through to the result for the caller.

    Returns:
        CompositeScore with rounded value, unrounded value, breakdown, warnings.

    Raises:
        MissingSignalError: a table key has no matching signal.
        DegenerateRangeError: a signal's range collapses to a point.
        SignalError: duplicate or non-finite signals.
    """
    by_key = _index_signals(signals)
    missing = [key for key in table if key not in by_key]
    if missing:
        raise MissingSignalError(table.name, missing)

    breakdown: dict[str, float] = {}
    normalized: dict[str, float] = {}
    warnings: list[RangeWarning] = []
    for key, weight in table.items():
        result = normalize_signal(by_key[key])
        normalized[key] = result.value
        breakdown[key] = SCORE_MAX * weight * result.value
        if result.warning is not None:
            warnings.append(result.warning)

    unrounded = min(SCORE_MAX, max(SCORE_MIN, math.fsum(breakdown.values())))
    composite = CompositeScore(
        subject_id=subject_id,
        formula_name=table.name,
        value=round_half_up(unrounded),
        unrounded_value=unrounded,
        component_breakdown=breakdown,
        normalized=normalized,
        warnings=tuple(warnings),
    )
    logger.debug(
        "composite_computed",
        subject_id=subject_id,
        formula=table.name,
        value=composite.value,
        unrounded_value=round(unrounded, 4),
        warnings=len(warnings),
    )
    return composite
