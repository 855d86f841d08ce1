"""
Scoring pipeline: signals -> composite -> tier, per subject or per cohort.

Orchestrates the engine for the presentation layer. A subject whose
composite fails is reported as a failure with its reason, never as a zero
score, so "bad or missing data" stays distinct from "legitimately low".
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable

from pulse_scoring.core.exceptions import ScoringError
from pulse_scoring.pulse_logging import get_logger
from pulse_scoring.scoring_engine.composite import CompositeScore, compute_composite
from pulse_scoring.scoring_engine.formulas import Formula
from pulse_scoring.scoring_engine.signals import RangeWarning, Signal

if TYPE_CHECKING:
    from pulse_scoring.providers.base import SignalProvider

logger = get_logger(__name__)


@dataclass(frozen=True)
class ScoreRecord:
    """Score, tier, and diagnostics for one subject under one formula."""

    subject_id: str
    formula_name: str
    composite: CompositeScore
    tier: str

    @property
    def value(self) -> int:
        return self.composite.value

    @property
    def warnings(self) -> tuple[RangeWarning, ...]:
        return self.composite.warnings

    def to_dict(self) -> dict[str, Any]:
        return {
            "subject_id": self.subject_id,
            "formula_name": self.formula_name,
            "value": self.composite.value,
            "unrounded_value": self.composite.unrounded_value,
            "tier": self.tier,
            "component_breakdown": dict(self.composite.component_breakdown),
            "warnings": [w.to_dict() for w in self.composite.warnings],
        }


@dataclass
class CohortResult:
    formula_name: str
    records: list[ScoreRecord] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)
    """subject_id -> error message for subjects that could not be scored."""

    @property
    def tier_counts(self) -> dict[str, int]:
        return dict(Counter(r.tier for r in self.records))

    @property
    def average_value(self) -> float | None:
        if not self.records:
            return None
        return sum(r.composite.unrounded_value for r in self.records) / len(self.records)

    def by_tier(self, tier: str) -> list[ScoreRecord]:
        return [r for r in self.records if r.tier == tier]

    def to_dict(self) -> dict[str, Any]:
        return {
            "formula_name": self.formula_name,
            "records": [r.to_dict() for r in self.records],
            "tier_counts": self.tier_counts,
            "average_value": self.average_value,
            "failures": dict(self.failures),
        }


def evaluate(formula: Formula, subject_id: str, signals: Iterable[Signal]) -> ScoreRecord:
    """
    Composite and tier for one subject.

    The tier is classified from the rounded display value, so the label
    always agrees with the number shown.

    Raises:
        ScoringError: any composite failure (missing signal, degenerate range, ...).
    """
    composite = compute_composite(signals, formula.table, subject_id=subject_id)
    tier = formula.bands.classify(composite.value)
    logger.debug(
        "tier_classified",
        subject_id=subject_id,
        formula=formula.name,
        value=composite.value,
        tier=tier,
    )
    return ScoreRecord(
        subject_id=subject_id,
        formula_name=formula.name,
        composite=composite,
        tier=tier,
    )


def evaluate_subject(
    formula: Formula,
    subject_id: str,
    provider: SignalProvider,
) -> ScoreRecord:
    """Fetch the formula's signals from a provider, then evaluate()."""
    return evaluate(formula, subject_id, provider.get_signals(subject_id, formula))


def evaluate_cohort(
    formula: Formula,
    subject_ids: Iterable[str],
    provider: SignalProvider,
) -> CohortResult:
    """
    Evaluate every subject; failures are collected, not raised.

    Each failure is logged at warning level with its reason.
    """
    result = CohortResult(formula_name=formula.name)
    for subject_id in subject_ids:
        try:
            result.records.append(evaluate_subject(formula, subject_id, provider))
        except ScoringError as e:
            result.failures[subject_id] = str(e)
            logger.warning(
                "subject_score_failed",
                subject_id=subject_id,
                formula=formula.name,
                error_type=type(e).__name__,
                error=str(e),
            )
    logger.info(
        "cohort_evaluated",
        formula=formula.name,
        scored=len(result.records),
        failed=len(result.failures),
        tier_counts=result.tier_counts,
    )
    return result
