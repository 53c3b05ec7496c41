"""Builders - Element records and the reference graph of a parse run.

This module provides the two construction steps between token parsing and
closure resolution:
- RecordBuilder: Tokens of one element -> ElementRecord
- ReferenceGraphBuilder: ElementRecords -> EdgeSet (filtered by known ids)
"""

from __future__ import annotations

import logging

from osmwd.graph.elements import ElementKey, ElementRecord
from osmwd.graph.known_ids import KnownIdFilter
from osmwd.graph.parsers import CENTROID_KIND, IDENTIFIER_KIND, ParsedContent
from osmwd.graph.relations import DanglingReference, EdgeSet, ReferenceEdge

logger = logging.getLogger(__name__)

FEATURE_TYPE_SEPARATOR = "-"


class RecordBuilder:
    """Builds the canonical record of an element from its tokens.

    Usage:
        builder = RecordBuilder(known_ids)
        record = builder.build(parsed_content)

    Tie-break: when an element carries several ``Q`` (or ``c``) tokens the
    maximum payload wins, independent of token order.
    """

    def __init__(self, known_ids: KnownIdFilter) -> None:
        self.known_ids = known_ids

    def build(self, content: ParsedContent) -> ElementRecord:
        """Build the record of one element.

        Args:
            content: Distinct tokens of the element.

        Returns:
            The element's record.
        """
        wd_ids = [
            t.int_value
            for t in content.tokens_of_kind(IDENTIFIER_KIND)
            if t.int_value is not None
        ]
        centroids = [t.payload for t in content.tokens_of_kind(CENTROID_KIND) if t.payload]
        free_text = [t.payload for t in content.tokens if t.is_free_text]
        refs = tuple((t.kind, int(t.payload)) for t in content.tokens if t.is_reference)

        return ElementRecord(
            key=content.key,
            wd_id=max(wd_ids) if wd_ids else None,
            centroid=max(centroids) if centroids else None,
            feature_type=FEATURE_TYPE_SEPARATOR.join(free_text),
            original_ref_count=len(refs),
            valid_ref_count=sum(1 for _, ref_id in refs if ref_id in self.known_ids),
            refs=refs,
        )


class ReferenceGraphBuilder:
    """Builds the reference graph of a parse run.

    Usage:
        builder = ReferenceGraphBuilder(known_ids)
        for record in records:
            builder.add_record(record)
        edges = builder.build()

    Each edge carries the container's direct identifier as recorded. The
    referenced key is resolved against the records of the run: the record
    whose type code matches the token kind wins, otherwise the first record
    with that id in node, way, relation order.
    """

    def __init__(self, known_ids: KnownIdFilter) -> None:
        self.known_ids = known_ids
        self._records: list[ElementRecord] = []
        self._keys_by_id: dict[int, list[ElementKey]] = {}
        self._dangling: list[DanglingReference] = []

    def add_record(self, record: ElementRecord) -> None:
        """Register a record as both a potential container and target."""
        self._records.append(record)
        self._keys_by_id.setdefault(record.key.id, []).append(record.key)

    def _resolve_key(self, kind: str, ref_id: int) -> ElementKey | None:
        candidates = self._keys_by_id.get(ref_id)
        if not candidates:
            return None
        for key in candidates:
            if key.type.value == kind:
                return key
        return min(candidates, key=lambda k: k.type.order)

    def build(self) -> EdgeSet:
        """Build the de-duplicated edge set.

        References whose id is not in the known-id filter, or that no record
        of the run can resolve, are collected as dangling references.

        Returns:
            EdgeSet for the current run.
        """
        edges = EdgeSet()
        self._dangling = []

        for record in self._records:
            for kind, ref_id in record.refs:
                referenced = None
                if ref_id in self.known_ids:
                    referenced = self._resolve_key(kind, ref_id)
                if referenced is None:
                    self._dangling.append(DanglingReference(record.key, kind, ref_id))
                    continue
                edges.add(ReferenceEdge(record.key, record.wd_id, referenced))

        logger.debug(
            "Reference graph: %d edges from %d records, %d dangling references",
            len(edges),
            len(self._records),
            len(self._dangling),
        )
        return edges

    @property
    def dangling_references(self) -> list[DanglingReference]:
        """Dangling references found by the last build()."""
        return list(self._dangling)


__all__ = ["FEATURE_TYPE_SEPARATOR", "RecordBuilder", "ReferenceGraphBuilder"]
