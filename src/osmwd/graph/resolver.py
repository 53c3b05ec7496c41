"""Closure resolver - Candidate identifiers from related elements.

Two strategies read the edge set of a parse run and gather candidate
identifiers for elements:

- FAST (adjacency): one hop below the element. For each member R of the
  element, if R is itself a container with a positive identifier, R and its
  identifier become a candidate.
- COMPLETE (bounded closure): climbs the containment direction from every
  referenced element at once, layer by layer, collecting the identifier of
  every container visited until the path reaches ``max_depth``.

The strategy is chosen once per run through ResolverConfig. Neither strategy
mutates the edge set.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from osmwd.graph.elements import ElementKey
from osmwd.graph.metrics import Candidate, ClosureResult, aggregate_candidates
from osmwd.graph.relations import EdgeSet

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 5


class ResolveStrategy(Enum):
    """Closure strategy of a resolver run."""

    FAST = "fast"
    COMPLETE = "complete"

    @classmethod
    def parse(cls, value: str | ResolveStrategy) -> ResolveStrategy:
        """Parse a strategy name.

        Raises:
            ValueError: For an unknown strategy name.
        """
        if isinstance(value, ResolveStrategy):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            names = ", ".join(s.value for s in cls)
            raise ValueError(
                f"Unknown resolver strategy {value!r} (expected one of: {names})"
            ) from None


@dataclass(frozen=True)
class ResolverConfig:
    """Configuration of one resolver run.

    Attributes:
        strategy: FAST (adjacency) or COMPLETE (bounded closure).
        max_depth: Maximum path length for COMPLETE, counting the starting
            element's slot; must be at least 1.
        purge_intermediate: Release tokens and edges once the run finishes.
    """

    strategy: ResolveStrategy = ResolveStrategy.FAST
    max_depth: int = DEFAULT_MAX_DEPTH
    purge_intermediate: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.strategy, ResolveStrategy):
            object.__setattr__(self, "strategy", ResolveStrategy.parse(self.strategy))
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
            raise ValueError(f"max_depth must be an integer, got {self.max_depth!r}")
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {self.max_depth}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ResolverConfig:
        """Create ResolverConfig from the ``[resolver]`` config table.

        Args:
            data: Dictionary with optional keys: strategy, max_depth,
                  purge_intermediate

        Returns:
            Validated ResolverConfig.

        Raises:
            ValueError: For an unknown strategy or an invalid max_depth.
        """
        return cls(
            strategy=ResolveStrategy.parse(data.get("strategy", ResolveStrategy.FAST.value)),
            max_depth=data.get("max_depth", DEFAULT_MAX_DEPTH),
            purge_intermediate=bool(data.get("purge_intermediate", True)),
        )


class ResolutionCancelled(RuntimeError):
    """Raised when a cancel callback stops a closure between layers."""


def resolve_adjacency(
    edges: EdgeSet,
    keys: Iterable[ElementKey],
) -> dict[ElementKey, list[Candidate]]:
    """Gather candidates one hop below each element.

    For a target T, every member R of T (T -> R) that is itself a container
    whose stored identifier is positive yields the candidate
    ``(identifier(R), R)``. Candidates are distinct per target.

    Args:
        edges: Edge set of the run.
        keys: Target elements.

    Returns:
        Candidate list per target (targets without candidates omitted).
    """
    result: dict[ElementKey, list[Candidate]] = {}
    for target in keys:
        seen: set[Candidate] = set()
        candidates: list[Candidate] = []
        for edge in edges.iter_outgoing(target):
            member = edge.referenced
            # Any outgoing edge of the member carries its identifier
            member_edge = next(edges.iter_outgoing(member), None)
            if member_edge is None or not member_edge.wd_id:
                continue
            candidate = Candidate(member_edge.wd_id, member)
            if candidate not in seen:
                seen.add(candidate)
                candidates.append(candidate)
        if candidates:
            result[target] = candidates
    return result


@dataclass(frozen=True)
class _Path:
    """A partial climb from a target towards its ancestors."""

    target: ElementKey
    top: ElementKey
    pairs: tuple[Candidate, ...] = ()

    @property
    def length(self) -> int:
        # The target's own slot counts as the first position
        return 1 + len(self.pairs)


def resolve_bounded_closure(
    edges: EdgeSet,
    max_depth: int = DEFAULT_MAX_DEPTH,
    cancel: Callable[[], bool] | None = None,
) -> dict[ElementKey, list[Candidate]]:
    """Gather candidates from the ancestors of every referenced element.

    All referenced elements are expanded together, one layer per step. A path
    is extended by an edge whose referenced key is the path's current top;
    the edge's container becomes the new top and its (identifier, key) pair
    is appended. A step to a container equal to the current top (a
    self-referencing element) is refused. Longer cycles are only stopped by
    ``max_depth``. Every path holding at least one container contributes its
    pairs to its target.

    Args:
        edges: Edge set of the run.
        max_depth: Maximum path length, counting the target's slot.
        cancel: Optional callback polled between layers.

    Returns:
        Candidate multiset per target (targets without candidates omitted).

    Raises:
        ValueError: If max_depth is below 1.
        ResolutionCancelled: If ``cancel`` returns True between layers.
    """
    if max_depth < 1:
        raise ValueError(f"max_depth must be at least 1, got {max_depth}")

    result: dict[ElementKey, list[Candidate]] = {}
    frontier = [_Path(target=key, top=key) for key in edges.referenced_keys()]
    truncated = 0
    layer = 1

    while frontier:
        if cancel is not None and cancel():
            raise ResolutionCancelled(f"Closure cancelled before layer {layer + 1}")

        next_frontier: list[_Path] = []
        for path in frontier:
            climbs = [e for e in edges.iter_incoming(path.top) if e.container != path.top]
            if path.length >= max_depth:
                if climbs:
                    truncated += 1
                continue
            for edge in climbs:
                next_frontier.append(
                    _Path(
                        target=path.target,
                        top=edge.container,
                        pairs=path.pairs + (Candidate(edge.wd_id, edge.container),),
                    )
                )

        # Layer barrier: every path of this layer is final before merging
        for path in next_frontier:
            result.setdefault(path.target, []).extend(path.pairs)
        frontier = next_frontier
        layer += 1

    if truncated:
        logger.info("Closure stopped %d paths at max_depth=%d", truncated, max_depth)
    return result


def resolve(
    edges: EdgeSet,
    keys: Iterable[ElementKey],
    config: ResolverConfig,
    cancel: Callable[[], bool] | None = None,
) -> dict[ElementKey, ClosureResult]:
    """Run the configured strategy and aggregate per element.

    Args:
        edges: Edge set of the run.
        keys: All element keys of the run.
        config: Resolver configuration (strategy and depth).
        cancel: Optional callback polled between closure layers.

    Returns:
        ClosureResult for every key (empty when no candidate was found).
    """
    keys = list(keys)
    if config.strategy is ResolveStrategy.FAST:
        candidates = resolve_adjacency(edges, keys)
    else:
        candidates = resolve_bounded_closure(edges, config.max_depth, cancel)

    results = {key: aggregate_candidates(candidates.get(key, ())) for key in keys}
    resolved = sum(1 for r in results.values() if not r.is_empty)
    logger.info(
        "Resolver (%s): %d of %d elements have candidates",
        config.strategy.value,
        resolved,
        len(keys),
    )
    return results


__all__ = [
    "DEFAULT_MAX_DEPTH",
    "ResolutionCancelled",
    "ResolveStrategy",
    "ResolverConfig",
    "resolve",
    "resolve_adjacency",
    "resolve_bounded_closure",
]
