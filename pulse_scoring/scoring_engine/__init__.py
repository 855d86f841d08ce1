"""
Scoring engine package — composite scores, tiers, trends, and cross-risk.

Consumes already-fetched raw signals, normalizes them onto 0–1, combines them
with a named weight table into a 0–100 composite, and classifies the result
into ordinal tiers. Pure functions; no I/O, no shared state.
"""

from pulse_scoring.scoring_engine.signals import (
    NormalizedSignal,
    Polarity,
    RangeWarning,
    Signal,
    SignalSpec,
    normalize,
    normalize_signal,
)
from pulse_scoring.scoring_engine.weights import WeightTable
from pulse_scoring.scoring_engine.composite import (
    CompositeScore,
    compute_composite,
    round_half_up,
)
from pulse_scoring.scoring_engine.tiers import TierBand, TierBands, classify
from pulse_scoring.scoring_engine.trend import (
    STABILITY_BANDS,
    TREND_STRENGTH_BANDS,
    StabilityResult,
    TimePoint,
    TimeSeries,
    TrendResult,
    estimate_stability,
    estimate_trend,
    linear_slope,
)
from pulse_scoring.scoring_engine.cross_risk import (
    CrossRiskMembership,
    CrossRiskRule,
    CrossRiskSummary,
    GroupBreakdown,
    combine,
    flag_from_tier,
    overlap_breakdown,
)
from pulse_scoring.scoring_engine.formulas import (
    FORMULAS,
    RISK_LEVEL_BANDS,
    Formula,
    build_formula,
    get_formula,
)
from pulse_scoring.scoring_engine.pipeline import (
    CohortResult,
    ScoreRecord,
    evaluate,
    evaluate_cohort,
    evaluate_subject,
)

__all__ = [
    "NormalizedSignal",
    "Polarity",
    "RangeWarning",
    "Signal",
    "SignalSpec",
    "normalize",
    "normalize_signal",
    "WeightTable",
    "CompositeScore",
    "compute_composite",
    "round_half_up",
    "TierBand",
    "TierBands",
    "classify",
    "STABILITY_BANDS",
    "TREND_STRENGTH_BANDS",
    "StabilityResult",
    "TimePoint",
    "TimeSeries",
    "TrendResult",
    "estimate_stability",
    "estimate_trend",
    "linear_slope",
    "CrossRiskMembership",
    "CrossRiskRule",
    "CrossRiskSummary",
    "GroupBreakdown",
    "combine",
    "flag_from_tier",
    "overlap_breakdown",
    "FORMULAS",
    "RISK_LEVEL_BANDS",
    "Formula",
    "build_formula",
    "get_formula",
    "CohortResult",
    "ScoreRecord",
    "evaluate",
    "evaluate_cohort",
    "evaluate_subject",
]
