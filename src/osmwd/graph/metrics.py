"""Closure metrics - Aggregation of candidate identifiers.

This module defines the data structures produced by closure resolution:
- Candidate: One (identifier, contributing element) pair
- ClosureResult: Identifier counts plus the multiply-corroborated witnesses
- aggregate_candidates: Collapses a candidate multiset into a ClosureResult
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field

from osmwd.graph.elements import ElementKey

# Bucket for candidates whose contributing element has no identifier
MISSING_WD_ID = 0


@dataclass(frozen=True)
class Candidate:
    """A candidate identifier gathered for an element.

    Attributes:
        wd_id: Identifier of the contributing element, or None.
        source: Key of the contributing element.
    """

    wd_id: int | None
    source: ElementKey

    @property
    def bucket(self) -> int:
        """Aggregation bucket; a missing identifier counts as 0."""
        return self.wd_id if self.wd_id is not None else MISSING_WD_ID


@dataclass(frozen=True)
class ClosureResult:
    """Aggregated candidates of one element.

    Attributes:
        members: Identifier -> number of candidates carrying it.
        witnesses: Sorted, distinct keys of contributing elements whose
            identifier occurred more than once.
    """

    members: dict[int, int] = field(default_factory=dict)
    witnesses: tuple[ElementKey, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.members

    @property
    def member_max(self) -> int:
        """Largest identifier count (0 when empty)."""
        return max(self.members.values(), default=0)


def aggregate_candidates(candidates: Iterable[Candidate]) -> ClosureResult:
    """Collapse a candidate multiset into identifier counts and witnesses.

    Counts candidates per identifier (a missing identifier is its own bucket)
    and keeps as witnesses the contributing keys whose identifier occurred
    more than once. Pure function of its input.

    Args:
        candidates: The candidate multiset of one element.

    Returns:
        ClosureResult (empty when there are no candidates).
    """
    candidates = list(candidates)
    counts = Counter(c.bucket for c in candidates)

    witnesses = {c.source for c in candidates if counts[c.bucket] > 1}

    return ClosureResult(
        members=dict(counts),
        witnesses=tuple(sorted(witnesses, key=ElementKey.sort_key)),
    )


__all__ = [
    "MISSING_WD_ID",
    "Candidate",
    "ClosureResult",
    "aggregate_candidates",
]
