"""
Tier classification — ordinal labels from monotonic threshold bands.

A TierBands set is an ordered list of half-open [min_inclusive, max_exclusive)
bands covering its domain (default [0, 100]) with no gap and no overlap; the
top band is closed, so a score equal to the upper bound gets the top label.
Validation happens once at construction; classify() is a linear scan.

The classifier is vocabulary-agnostic: risk tiers (Critical/High/Medium/Low),
quality tiers (Thriving/Stable/Struggling) and stability labels are all just
different band sets.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Sequence

from pulse_scoring.core.exceptions import InvalidTierBandsError, ScoreOutOfRangeError


@dataclass(frozen=True)
class TierBand:
    label: str
    min_inclusive: float
    max_exclusive: float

    def contains(self, score: float) -> bool:
        return self.min_inclusive <= score < self.max_exclusive

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "min_inclusive": self.min_inclusive,
            "max_exclusive": self.max_exclusive,
        }


class TierBands(Sequence):
    """
    Validated, ascending band set.

    Raises InvalidTierBandsError when bands are empty, unlabeled, empty-width,
    out of order, overlapping, gapped, or do not start at `lower` and end at
    `upper`. `upper` may be math.inf for open-ended measures such as
    standard deviation.
    """

    def __init__(
        self,
        bands: Iterable[TierBand],
        *,
        lower: float = 0.0,
        upper: float = 100.0,
        name: str = "",
    ) -> None:
        self.name = name
        self.lower = float(lower)
        self.upper = float(upper)
        self._bands = tuple(bands)
        self._validate()

    @classmethod
    def from_cutoffs(
        cls,
        labels: Sequence[str],
        cutoffs: Sequence[float],
        *,
        lower: float = 0.0,
        upper: float = 100.0,
        name: str = "",
    ) -> TierBands:
        """
        Build bands from ascending labels and the interior cutoffs between them.

        from_cutoffs(["Low", "High"], [50]) -> Low [0, 50), High [50, 100].
        """
        if len(labels) != len(cutoffs) + 1:
            raise InvalidTierBandsError(
                f"{len(labels)} labels need {len(labels) - 1} cutoffs, got {len(cutoffs)}"
            )
        edges = [lower, *cutoffs, upper]
        bands = [
            TierBand(label, float(edges[i]), float(edges[i + 1]))
            for i, label in enumerate(labels)
        ]
        return cls(bands, lower=lower, upper=upper, name=name)

    def _validate(self) -> None:
        where = f"Tier bands '{self.name}'" if self.name else "Tier bands"
        if math.isnan(self.lower) or math.isnan(self.upper) or self.upper <= self.lower:
            raise InvalidTierBandsError(f"{where}: invalid domain [{self.lower}, {self.upper}]")
        if not self._bands:
            raise InvalidTierBandsError(f"{where}: no bands")

        seen: set[str] = set()
        for band in self._bands:
            if not band.label:
                raise InvalidTierBandsError(f"{where}: band without a label")
            if band.label in seen:
                raise InvalidTierBandsError(f"{where}: duplicate label '{band.label}'")
            seen.add(band.label)
            if not band.min_inclusive < band.max_exclusive:
                raise InvalidTierBandsError(
                    f"{where}: band '{band.label}' is empty or inverted "
                    f"[{band.min_inclusive}, {band.max_exclusive})"
                )

        first, last = self._bands[0], self._bands[-1]
        if first.min_inclusive != self.lower:
            raise InvalidTierBandsError(
                f"{where}: first band '{first.label}' starts at {first.min_inclusive}, "
                f"expected {self.lower}"
            )
        if last.max_exclusive != self.upper:
            raise InvalidTierBandsError(
                f"{where}: last band '{last.label}' ends at {last.max_exclusive}, "
                f"expected {self.upper}"
            )
        for prev, band in zip(self._bands, self._bands[1:]):
            if band.min_inclusive < prev.max_exclusive:
                raise InvalidTierBandsError(
                    f"{where}: '{band.label}' overlaps or precedes '{prev.label}'"
                )
            if band.min_inclusive > prev.max_exclusive:
                raise InvalidTierBandsError(
                    f"{where}: gap between '{prev.label}' ({prev.max_exclusive}) "
                    f"and '{band.label}' ({band.min_inclusive})"
                )

    def __getitem__(self, index):
        return self._bands[index]

    def __len__(self) -> int:
        return len(self._bands)

    def __iter__(self) -> Iterator[TierBand]:
        return iter(self._bands)

    def __repr__(self) -> str:
        labels = ", ".join(b.label for b in self._bands)
        return f"TierBands({self.name or 'unnamed'}: {labels})"

    @property
    def labels(self) -> list[str]:
        """Labels in ascending score order."""
        return [b.label for b in self._bands]

    @property
    def bottom(self) -> TierBand:
        return self._bands[0]

    @property
    def top(self) -> TierBand:
        return self._bands[-1]

    def classify(self, score: float) -> str:
        """Return the label of the band containing score; the top band is closed."""
        value = float(score)
        if math.isnan(value) or value < self.lower or value > self.upper:
            raise ScoreOutOfRangeError(value, self.lower, self.upper)
        for band in self._bands:
            if band.contains(value):
                return band.label
        return self._bands[-1].label

    def rank(self, label: str) -> int:
        """Ordinal position of label (0 = bottom band). Raises KeyError if unknown."""
        for i, band in enumerate(self._bands):
            if band.label == label:
                return i
        raise KeyError(label)

    def to_list(self) -> list[dict[str, Any]]:
        return [b.to_dict() for b in self._bands]


def classify(score: float, bands: TierBands | Iterable[TierBand]) -> str:
    """
    Map a score to its tier label.

    Accepts a validated TierBands or a plain band list over [0, 100] (validated
    on the spot; prefer building TierBands once for static tables).
    """
    if not isinstance(bands, TierBands):
        bands = TierBands(bands)
    return bands.classify(score)
