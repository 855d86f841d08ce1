#!/usr/bin/env python3
"""
Pulse score report — score a mock cohort under one formula and print JSON.

For each subject: composite, tier, component breakdown, trend and stability
of the formula's first signal, and alerts. Ends with tier counts and the
cross-risk summary of academic + emotional flags for the same cohort.

Usage:
  py -m pulse_scoring.tools.score_report --formula teacher_engagement --subjects 5 --seed 7
  py -m pulse_scoring.tools.score_report --list
"""

from __future__ import annotations

import argparse
import json
import sys

from pulse_scoring.alerts import AlertConfig, evaluate_alerts
from pulse_scoring.config import get_settings
from pulse_scoring.providers import MockSignalProvider
from pulse_scoring.pulse_logging import get_logger
from pulse_scoring.scoring_engine import (
    FORMULAS,
    CrossRiskRule,
    combine,
    estimate_stability,
    estimate_trend,
    evaluate,
    evaluate_cohort,
    flag_from_tier,
    get_formula,
)
from pulse_scoring.scoring_engine.cross_risk import FLAG_ACADEMIC, FLAG_EMOTIONAL
from pulse_scoring.scoring_engine.formulas import ACADEMIC_RISK, EMOTIONAL_RISK

logger = get_logger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Score a mock cohort and print JSON.")
    parser.add_argument(
        "--formula",
        default="student_success",
        choices=sorted(FORMULAS),
        help="Formula name (see --list)",
    )
    parser.add_argument("--subjects", type=int, default=10, help="Number of mock subjects")
    parser.add_argument("--seed", type=int, default=settings.mock_seed, help="Mock data seed")
    parser.add_argument(
        "--dead-band",
        type=float,
        default=settings.trend_dead_band,
        help="Relative change treated as a stable trend",
    )
    parser.add_argument("--alert-below", type=float, default=None, help="Alert when score is below")
    parser.add_argument("--list", action="store_true", help="List formulas and exit")
    return parser.parse_args(argv)


def _cross_risk(provider: MockSignalProvider, subject_ids: list[str]) -> dict:
    rule = CrossRiskRule(frozenset({FLAG_ACADEMIC, FLAG_EMOTIONAL}))
    memberships = []
    for sid in subject_ids:
        academic = evaluate(ACADEMIC_RISK, sid, provider.get_signals(sid, ACADEMIC_RISK))
        emotional = evaluate(EMOTIONAL_RISK, sid, provider.get_signals(sid, EMOTIONAL_RISK))
        memberships.append(
            rule.evaluate_flags(
                sid,
                {
                    FLAG_ACADEMIC: flag_from_tier(academic.tier),
                    FLAG_EMOTIONAL: flag_from_tier(emotional.tier),
                },
            )
        )
    return combine(memberships, population=len(subject_ids)).to_dict()


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    if args.list:
        json.dump({name: f.to_dict() for name, f in FORMULAS.items()}, sys.stdout, indent=2)
        print()
        return 0
    if args.subjects < 1:
        print("--subjects must be >= 1", file=sys.stderr)
        return 2

    formula = get_formula(args.formula)
    provider = MockSignalProvider(seed=args.seed)
    subject_ids = provider.subject_ids(args.subjects)
    cohort = evaluate_cohort(formula, subject_ids, provider)
    config = AlertConfig(score_alert_below=args.alert_below)
    trend_key = formula.keys[0]

    subjects = []
    for record in cohort.records:
        series = provider.get_series(record.subject_id, trend_key)
        subjects.append({
            **record.to_dict(),
            "trend": {"key": trend_key, **estimate_trend(series, dead_band=args.dead_band).to_dict()},
            "stability": {"key": trend_key, **estimate_stability(series).to_dict()},
            "alerts": [a.to_dict() for a in evaluate_alerts(record, config)],
        })

    report = {
        "formula": formula.name,
        "seed": args.seed,
        "subjects": subjects,
        "tier_counts": cohort.tier_counts,
        "average_value": cohort.average_value,
        "failures": cohort.failures,
        "cross_risk": _cross_risk(provider, subject_ids),
    }
    json.dump(report, sys.stdout, indent=2)
    print()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
