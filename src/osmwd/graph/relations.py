"""Relations - Membership edges between elements.

This module defines the directed edges of the reference graph:
- ReferenceEdge: container -> referenced element, carrying the container's
  own Wikidata identifier
- EdgeSet: The de-duplicated edge set of one parse run with the indexes
  both closure strategies read from
- DanglingReference: A reference token that produced no edge
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from osmwd.graph.elements import ElementKey


@dataclass(frozen=True)
class ReferenceEdge:
    """A membership edge between two elements.

    Attributes:
        container: The way or relation listing the member.
        wd_id: The container's direct identifier at build time, or None.
        referenced: The member element.
    """

    container: ElementKey
    wd_id: int | None
    referenced: ElementKey

    @property
    def is_self_loop(self) -> bool:
        return self.container == self.referenced

    def __str__(self) -> str:
        tag = f"Q{self.wd_id}" if self.wd_id is not None else "-"
        return f"{self.container} --[{tag}]--> {self.referenced}"


@dataclass(frozen=True)
class DanglingReference:
    """A reference token that could not become an edge.

    Attributes:
        container: Element whose annotation holds the reference.
        kind: Token kind of the reference (usually n, w or r).
        ref_id: The referenced integer id.
    """

    container: ElementKey
    kind: str
    ref_id: int

    def __str__(self) -> str:
        return f"{self.container} --> {self.kind}{self.ref_id} (missing)"


class EdgeSet:
    """De-duplicated set of reference edges.

    Edges are unique per (container, referenced) pair; adding the same pair
    twice keeps the first edge. Iteration follows insertion order.
    """

    def __init__(self, edges: Iterable[ReferenceEdge] = ()) -> None:
        self._edges: dict[tuple[ElementKey, ElementKey], ReferenceEdge] = {}
        self._by_container: dict[ElementKey, list[ReferenceEdge]] = {}
        self._by_referenced: dict[ElementKey, list[ReferenceEdge]] = {}
        for edge in edges:
            self.add(edge)

    def add(self, edge: ReferenceEdge) -> bool:
        """Add an edge unless its (container, referenced) pair exists.

        Returns:
            True if the edge was added, False if it collapsed into an
            existing one.
        """
        pair = (edge.container, edge.referenced)
        if pair in self._edges:
            return False
        self._edges[pair] = edge
        self._by_container.setdefault(edge.container, []).append(edge)
        self._by_referenced.setdefault(edge.referenced, []).append(edge)
        return True

    def update(self, edges: Iterable[ReferenceEdge]) -> None:
        for edge in edges:
            self.add(edge)

    def __iter__(self) -> Iterator[ReferenceEdge]:
        return iter(self._edges.values())

    def __len__(self) -> int:
        return len(self._edges)

    def __contains__(self, edge: object) -> bool:
        if not isinstance(edge, ReferenceEdge):
            return False
        return self._edges.get((edge.container, edge.referenced)) == edge

    def iter_outgoing(self, container: ElementKey) -> Iterator[ReferenceEdge]:
        """Edges whose container is ``container``."""
        yield from self._by_container.get(container, ())

    def iter_incoming(self, referenced: ElementKey) -> Iterator[ReferenceEdge]:
        """Edges whose referenced element is ``referenced``."""
        yield from self._by_referenced.get(referenced, ())

    def is_container(self, key: ElementKey) -> bool:
        """True if ``key`` has outgoing edges."""
        return key in self._by_container

    def containers(self) -> Iterator[ElementKey]:
        yield from self._by_container

    def referenced_keys(self) -> Iterator[ElementKey]:
        yield from self._by_referenced

    def clear(self) -> None:
        self._edges.clear()
        self._by_container.clear()
        self._by_referenced.clear()


__all__ = ["DanglingReference", "ReferenceEdge", "EdgeSet"]
