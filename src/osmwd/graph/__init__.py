"""Graph module - Element records, reference graph and closure.

Exports:
- ElementType: Enum of OSM element types
- ElementKey: (type, id, dataset) key of an element
- ElementRecord: Canonical record parsed from an element's annotation
- RawRow: One input row of a dump
- KnownIdFilter: Ids present in the current batch
- ReferenceEdge: container -> member edge carrying the container's identifier
- EdgeSet: De-duplicated edge set with container/member indexes
- DanglingReference: Reference that produced no edge
- Candidate: (identifier, contributing element) pair
- ClosureResult: Aggregated candidates of one element

Note: the pipeline entry point is osmwd.graph.factory.run_parse()
"""

from osmwd.graph.elements import ElementKey, ElementRecord, ElementType, RawRow
from osmwd.graph.known_ids import KnownIdFilter
from osmwd.graph.metrics import Candidate, ClosureResult, aggregate_candidates
from osmwd.graph.relations import DanglingReference, EdgeSet, ReferenceEdge

__all__ = [
    "ElementType",
    "ElementKey",
    "ElementRecord",
    "RawRow",
    "KnownIdFilter",
    "ReferenceEdge",
    "EdgeSet",
    "DanglingReference",
    "Candidate",
    "ClosureResult",
    "aggregate_candidates",
]
