"""
Cross-risk: compound membership across independent risk flags.

A subject is compound-risk when every flag in a rule's required set is
present (e.g. academic_flag AND emotional_flag). Population percentages are
always computed against a denominator the caller passes in; nothing here
assumes a global cohort size. Grouping (department, grade level, ...) is a
plain reduction over each membership's group attributes.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from pulse_scoring.core.exceptions import PopulationError
from pulse_scoring.pulse_logging import get_logger

logger = get_logger(__name__)

FLAG_ACADEMIC = "academic_flag"
FLAG_EMOTIONAL = "emotional_flag"
FLAG_DISENGAGED = "disengaged_flag"

# Tiers that raise a flag when derived from a RISK_LEVEL_BANDS classification
DEFAULT_FLAGGED_TIERS = frozenset({"High", "Critical"})


def flag_from_tier(tier: str, flagged_tiers: Iterable[str] = DEFAULT_FLAGGED_TIERS) -> bool:
    """True when a tier label is one of the flagged tiers."""
    return tier in frozenset(flagged_tiers)


def percentage(count: int, population: int) -> float:
    """count / population * 100; 0.0 for an empty population."""
    if population < 0:
        raise PopulationError(f"Population must be >= 0, got {population}")
    if count > population:
        raise PopulationError(f"Count {count} exceeds population {population}")
    if population == 0:
        return 0.0
    return count * 100.0 / population


@dataclass(frozen=True)
class CrossRiskMembership:
    """One subject's flags and derived compound-risk status."""

    subject_id: str
    flags: frozenset[str] = frozenset()
    is_compound_risk: bool = False
    groups: Mapping[str, str] = field(default_factory=dict)
    """Grouping attributes, e.g. {"department": "mathematics", "grade_level": "10"}."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "subject_id": self.subject_id,
            "flags": sorted(self.flags),
            "is_compound_risk": self.is_compound_risk,
            "groups": dict(self.groups),
        }


@dataclass(frozen=True)
class CrossRiskRule:
    """
    Declared required flag set for compound risk.

    Example:
        rule = CrossRiskRule(frozenset({"academic_flag", "emotional_flag"}))
        rule.evaluate("s-1", {"academic_flag", "emotional_flag"}).is_compound_risk  # True
    """

    required_flags: frozenset[str]
    name: str = "cross_risk"

    def __post_init__(self) -> None:
        object.__setattr__(self, "required_flags", frozenset(self.required_flags))
        if not self.required_flags:
            raise ValueError("CrossRiskRule needs at least one required flag")

    def evaluate(
        self,
        subject_id: str,
        flags: Iterable[str],
        groups: Mapping[str, str] | None = None,
    ) -> CrossRiskMembership:
        present = frozenset(flags)
        return CrossRiskMembership(
            subject_id=subject_id,
            flags=present,
            is_compound_risk=self.required_flags <= present,
            groups=dict(groups or {}),
        )

    def evaluate_flags(
        self,
        subject_id: str,
        flag_states: Mapping[str, bool],
        groups: Mapping[str, str] | None = None,
    ) -> CrossRiskMembership:
        """Same as evaluate() from a {flag_name: raised} mapping."""
        return self.evaluate(subject_id, [k for k, v in flag_states.items() if v], groups)


@dataclass(frozen=True)
class GroupBreakdown:
    group: str
    compound_count: int
    population: int
    compound_percentage: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "group": self.group,
            "compound_count": self.compound_count,
            "population": self.population,
            "compound_percentage": self.compound_percentage,
        }


@dataclass(frozen=True)
class CrossRiskSummary:
    compound_count: int
    compound_percentage: float
    population: int
    per_group_breakdown: dict[str, GroupBreakdown] = field(default_factory=dict)
    flag_counts: dict[str, int] = field(default_factory=dict)
    """Subjects raising each flag (compound or not)."""
    flag_percentages: dict[str, float] = field(default_factory=dict)
    compound_subjects: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "compound_count": self.compound_count,
            "compound_percentage": self.compound_percentage,
            "population": self.population,
            "per_group_breakdown": {
                k: v.to_dict() for k, v in self.per_group_breakdown.items()
            },
            "flag_counts": dict(self.flag_counts),
            "flag_percentages": dict(self.flag_percentages),
            "compound_subjects": list(self.compound_subjects),
        }


def combine(
    memberships: Iterable[CrossRiskMembership],
    population: int,
    *,
    group_by: str | None = None,
    group_populations: Mapping[str, int] | None = None,
) -> CrossRiskSummary:
    """
    Count compound-risk subjects and their share of an explicit population.

    Args:
        memberships: Evaluated memberships (one per subject).
        population: Denominator for all overall percentages; must be at least
            the number of memberships supplied.
        group_by: Group attribute to break down by (e.g. "department").
            Members without the attribute fall under "unassigned".
        group_populations: Denominator per group. Groups not listed use the
            number of supplied members in that group.

    Raises:
        PopulationError: population is negative or smaller than the cohort,
            or a group population is smaller than its supplied members.
    """
    members = list(memberships)
    if population < len(members):
        raise PopulationError(
            f"Population {population} is smaller than the {len(members)} subjects supplied"
        )

    compound = [m for m in members if m.is_compound_risk]
    flag_counts: Counter[str] = Counter()
    for m in members:
        flag_counts.update(m.flags)

    breakdown: dict[str, GroupBreakdown] = {}
    if group_by is not None:
        sizes: Counter[str] = Counter()
        hits: Counter[str] = Counter()
        for m in members:
            group = m.groups.get(group_by, "unassigned")
            sizes[group] += 1
            if m.is_compound_risk:
                hits[group] += 1
        explicit = dict(group_populations or {})
        for group, size in sizes.items():
            if group in explicit and explicit[group] < size:
                raise PopulationError(
                    f"Population {explicit[group]} for group '{group}' is smaller than "
                    f"the {size} subjects supplied"
                )
        for group in sorted(set(sizes) | set(explicit)):
            denominator = explicit.get(group, sizes[group])
            breakdown[group] = GroupBreakdown(
                group=group,
                compound_count=hits[group],
                population=denominator,
                compound_percentage=percentage(hits[group], denominator),
            )

    summary = CrossRiskSummary(
        compound_count=len(compound),
        compound_percentage=percentage(len(compound), population),
        population=population,
        per_group_breakdown=breakdown,
        flag_counts=dict(sorted(flag_counts.items())),
        flag_percentages={
            flag: percentage(count, population) for flag, count in sorted(flag_counts.items())
        },
        compound_subjects=tuple(m.subject_id for m in compound),
    )
    logger.debug(
        "cross_risk_combined",
        compound_count=summary.compound_count,
        population=population,
        group_by=group_by,
    )
    return summary


def overlap_breakdown(
    memberships: Iterable[CrossRiskMembership],
    flag_names: Iterable[str],
) -> dict[frozenset[str], int]:
    """
    Exclusive overlap counts for a set of flags (Venn diagram regions).

    Each subject is counted once, under the exact subset of flag_names it
    raises; subjects raising none of them are not counted. Every non-empty
    subset appears as a key, with 0 when no subject falls in it.
    """
    names = sorted(set(flag_names))
    regions: dict[frozenset[str], int] = {}
    for mask in range(1, 1 << len(names)):
        regions[frozenset(n for i, n in enumerate(names) if mask & (1 << i))] = 0
    for m in memberships:
        region = frozenset(m.flags) & frozenset(names)
        if region:
            regions[region] += 1
    return regions
