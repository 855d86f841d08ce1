"""
Formula catalog — the only per-feature artifact is data: a weight table, the
signal specs it weighs, and a tier band set.

Weights and cutoffs below are the product defaults used by the dashboard
views. They are policy, not methodology; build a Formula with different
numbers to change them.

Polarity is relative to the composite: in risk indices (higher = more risk)
a signal that raises risk is HIGHER_BETTER.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from pulse_scoring.core.exceptions import InvalidWeightTableError, UnknownFormulaError
from pulse_scoring.scoring_engine.signals import Polarity, Signal, SignalSpec
from pulse_scoring.scoring_engine.tiers import TierBands
from pulse_scoring.scoring_engine.weights import WeightTable

HB = Polarity.HIGHER_BETTER
LB = Polarity.LOWER_BETTER


@dataclass(frozen=True)
class Formula:
    """
    One scoring formula: weights, signal specs, and tiers.

    Construction checks that every weighted key has a spec and vice versa.
    """

    table: WeightTable
    specs: Mapping[str, SignalSpec]
    bands: TierBands
    description: str = ""

    def __post_init__(self) -> None:
        specs = dict(self.specs)
        for key, spec in specs.items():
            if spec.key != key:
                raise InvalidWeightTableError(
                    f"Formula '{self.table.name}': spec registered as '{key}' is for '{spec.key}'"
                )
        weighted, declared = set(self.table), set(specs)
        if weighted != declared:
            raise InvalidWeightTableError(
                f"Formula '{self.table.name}': weighted keys {sorted(weighted)} "
                f"do not match signal specs {sorted(declared)}"
            )
        object.__setattr__(self, "specs", MappingProxyType(specs))

    @property
    def name(self) -> str:
        return self.table.name

    @property
    def keys(self) -> list[str]:
        return list(self.table)

    def signal(self, key: str, raw_value: float) -> Signal:
        """Observe a raw value for one of this formula's signals."""
        try:
            spec = self.specs[key]
        except KeyError:
            raise KeyError(f"Formula '{self.name}' has no signal '{key}'") from None
        return spec.observe(raw_value)

    def signals(self, raw_values: Mapping[str, float]) -> list[Signal]:
        """Observe every known key present in raw_values; unknown keys are ignored."""
        return [self.signal(k, v) for k, v in raw_values.items() if k in self.specs]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "weights": dict(self.table),
            "signals": {
                k: {"valid_range": list(s.valid_range), "polarity": s.polarity.value}
                for k, s in self.specs.items()
            },
            "bands": self.bands.to_list(),
        }


def build_formula(
    name: str,
    signals: Iterable[tuple[str, tuple[float, float], Polarity, float]],
    bands: TierBands,
    description: str = "",
) -> Formula:
    """Build a Formula from (key, valid_range, polarity, weight) rows."""
    rows = list(signals)
    table = WeightTable(name, {key: weight for key, _, _, weight in rows})
    specs = {key: SignalSpec(key, rng, pol) for key, rng, pol, _ in rows}
    return Formula(table=table, specs=specs, bands=bands, description=description)


RISK_LEVEL_BANDS = TierBands.from_cutoffs(
    ["Low", "Medium", "High", "Critical"], [26, 51, 76], name="risk_level"
)

EARLY_WARNING_BANDS = TierBands.from_cutoffs(
    ["Low", "Moderate", "High", "Critical"], [26, 51, 76], name="early_warning"
)

SUCCESS_BANDS = TierBands.from_cutoffs(
    ["Intervention Needed", "Struggling", "Stable", "Thriving"], [40, 60, 80],
    name="student_success",
)

SUPPORT_BANDS = TierBands.from_cutoffs(
    ["Immediate Support Needed", "Monitor Closely", "Performing Well", "Exemplary"],
    [50, 70, 85],
    name="teacher_support",
)

ENGAGEMENT_BANDS = TierBands.from_cutoffs(
    ["Disengaged", "Moderately Engaged", "Engaged", "Highly Engaged"], [50, 70, 85],
    name="teacher_engagement",
)


STUDENT_SUCCESS = build_formula(
    "student_success",
    [
        ("current_grade", (0, 100), HB, 0.30),
        ("assignment_completion_rate", (0, 100), HB, 0.10),
        ("grade_trend", (-2, 2), HB, 0.10),
        ("avg_sentiment", (1, 6), HB, 0.30),
        ("mood_stability", (0, 100), HB, 0.10),
        ("positive_interaction_rate", (0, 100), HB, 0.10),
    ],
    SUCCESS_BANDS,
    "Half academic, half emotional wellbeing.",
)

TEACHER_SUPPORT = build_formula(
    "teacher_support",
    [
        ("class_avg_sentiment", (1, 6), HB, 0.40),
        ("student_engagement_rate", (0, 100), HB, 0.30),
        ("workload_level", (0, 100), LB, 0.30),
    ],
    SUPPORT_BANDS,
    "Which teachers need support: class mood, engagement, workload.",
)

TEACHER_ENGAGEMENT = build_formula(
    "teacher_engagement",
    [
        ("pulse_frequency_score", (0, 25), HB, 0.25),
        ("feedback_frequency_score", (0, 25), HB, 0.25),
        ("response_time_score", (0, 25), HB, 0.25),
        ("platform_activity_score", (0, 25), HB, 0.25),
    ],
    ENGAGEMENT_BANDS,
    "Sum of four 0-25 sub-scores.",
)

EARLY_WARNING = build_formula(
    "early_warning",
    [
        ("emotionally_flagged_pct", (0, 100), HB, 0.30),
        ("academically_flagged_pct", (0, 100), HB, 0.30),
        ("cross_risk_pct", (0, 100), HB, 0.20),
        ("avg_sentiment_trend", (-1, 1), LB, 0.10),
        ("avg_grade_trend", (-1, 1), LB, 0.10),
    ],
    EARLY_WARNING_BANDS,
    "School-wide risk index; higher is riskier.",
)

ACADEMIC_RISK = build_formula(
    "academic_risk",
    [
        ("current_grade", (0, 100), LB, 0.40),
        ("missing_assignments", (0, 10), HB, 0.35),
        ("grade_trend", (-2, 2), LB, 0.25),
    ],
    RISK_LEVEL_BANDS,
    "Per-student academic risk; higher is riskier.",
)

EMOTIONAL_RISK = build_formula(
    "emotional_risk",
    [
        ("avg_sentiment", (1, 6), LB, 0.40),
        ("low_sentiment_days", (0, 7), HB, 0.35),
        ("mood_variability", (0, 3), HB, 0.25),
    ],
    RISK_LEVEL_BANDS,
    "Per-student emotional risk over the last week; higher is riskier.",
)

DISENGAGEMENT = build_formula(
    "disengagement",
    [
        ("logins_per_week", (0, 7), LB, 0.35),
        ("consecutive_missed_deadlines", (0, 5), HB, 0.30),
        ("discussion_participation", (0, 100), LB, 0.20),
        ("grade_trend_change", (-2, 2), LB, 0.15),
    ],
    RISK_LEVEL_BANDS,
    "Academic disengagement; higher is more disengaged.",
)

FORMULAS: Mapping[str, Formula] = MappingProxyType({
    f.name: f
    for f in (
        STUDENT_SUCCESS,
        TEACHER_SUPPORT,
        TEACHER_ENGAGEMENT,
        EARLY_WARNING,
        ACADEMIC_RISK,
        EMOTIONAL_RISK,
        DISENGAGEMENT,
    )
})


def get_formula(name: str) -> Formula:
    try:
        return FORMULAS[name]
    except KeyError:
        raise UnknownFormulaError(name) from None
