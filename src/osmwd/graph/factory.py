"""Parse-run factory - Single entry point for the resolution pipeline.

Runs the whole engine over one dataset batch:

    rows -> known-id filter -> tokens -> records -> edges -> closure -> rows

All working state of a run (filter, tokens, records, edges, results) lives
in the ParseRun it returns; nothing is shared between runs, so independent
datasets can be processed side by side.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from osmwd.graph.builder import RecordBuilder, ReferenceGraphBuilder
from osmwd.graph.elements import ElementKey, ElementRecord, RawRow
from osmwd.graph.known_ids import KnownIdFilter
from osmwd.graph.metrics import ClosureResult
from osmwd.graph.parsers import ParseContext, ParsedContent
from osmwd.graph.parsers.annotation import AnnotationParser
from osmwd.graph.relations import DanglingReference, EdgeSet
from osmwd.graph.resolver import ResolverConfig, resolve
from osmwd.store import OutputRow

logger = logging.getLogger(__name__)


@dataclass
class ParseRun:
    """State and results of one dataset parse run.

    Attributes:
        dataset_id: Dataset the run belongs to.
        config: Resolver configuration used.
        known_ids: Known-id filter built from the batch.
        contents: Parsed tokens per element (emptied when purged).
        records: Element records, in first-seen row order.
        edges: Reference edge set (emptied when purged).
        dangling: References that produced no edge.
        results: Aggregated closure result per element.
    """

    dataset_id: int
    config: ResolverConfig
    known_ids: KnownIdFilter = field(default_factory=KnownIdFilter)
    contents: dict[ElementKey, ParsedContent] = field(default_factory=dict)
    records: dict[ElementKey, ElementRecord] = field(default_factory=dict)
    edges: EdgeSet = field(default_factory=EdgeSet)
    dangling: list[DanglingReference] = field(default_factory=list)
    results: dict[ElementKey, ClosureResult] = field(default_factory=dict)
    purged: bool = False

    def record(self, key: ElementKey) -> ElementRecord | None:
        return self.records.get(key)

    def result(self, key: ElementKey) -> ClosureResult:
        """Closure result of an element (empty when unknown)."""
        return self.results.get(key, ClosureResult())

    def output_rows(self) -> list[OutputRow]:
        """Element table of the run ordered by (type, id)."""
        rows = [
            OutputRow.from_record(record, self.results.get(key))
            for key, record in self.records.items()
        ]
        return sorted(rows, key=lambda r: r.key.sort_key())

    def purge(self) -> None:
        """Release the working tables (tokens and edges)."""
        self.contents.clear()
        self.edges.clear()
        self.purged = True

    def summary(self) -> dict[str, Any]:
        """Counts for reporting."""
        records = self.records.values()
        return {
            "dataset": self.dataset_id,
            "strategy": self.config.strategy.value,
            "max_depth": self.config.max_depth,
            "elements": len(self.records),
            "known_ids": len(self.known_ids),
            "with_wd_id": sum(1 for r in records if r.has_wd_id),
            "original_refs": sum(r.original_ref_count for r in records),
            "valid_refs": sum(r.valid_ref_count for r in records),
            "dangling_refs": len(self.dangling),
            "with_members": sum(1 for r in self.results.values() if not r.is_empty),
            "suspects": sum(
                1
                for key, r in self.results.items()
                if not r.is_empty and not self.records[key].has_wd_id
            ),
        }


def _group_rows(rows: Iterable[RawRow], dataset_id: int) -> dict[ElementKey, list[str]]:
    """Annotation strings per element key, in first-seen order."""
    grouped: dict[ElementKey, list[str]] = {}
    for row in rows:
        key = ElementKey(row.element_type, row.element_id, dataset_id)
        grouped.setdefault(key, []).append(row.annotation)
    return grouped


def run_parse(
    rows: Iterable[RawRow],
    dataset_id: int = 0,
    config: ResolverConfig | dict[str, Any] | None = None,
    cancel: Callable[[], bool] | None = None,
) -> ParseRun:
    """Run the resolution pipeline over one dataset batch.

    The configuration is validated before any row is read, so an invalid
    configuration never produces a partial run.

    Args:
        rows: Raw rows of the dataset (type, id, annotation).
        dataset_id: Id assigned by the dataset registry.
        config: ResolverConfig, a ``[resolver]`` dict, or None for defaults.
        cancel: Optional callback polled between closure layers.

    Returns:
        ParseRun with records, closure results and diagnostics.

    Raises:
        ValueError: For an invalid resolver configuration.
    """
    # 1. Validate configuration (fail fast)
    if config is None:
        config = ResolverConfig()
    elif isinstance(config, dict):
        config = ResolverConfig.from_dict(config)

    rows = list(rows)
    run = ParseRun(dataset_id=dataset_id, config=config)

    # 2. Rebuild the known-id filter from this batch only
    run.known_ids.rebuild(row.element_id for row in rows)

    # 3. Tokens and records
    parser = AnnotationParser()
    record_builder = RecordBuilder(run.known_ids)
    graph_builder = ReferenceGraphBuilder(run.known_ids)
    for key, texts in _group_rows(rows, dataset_id).items():
        content = parser.parse(texts, ParseContext(key=key))
        record = record_builder.build(content)
        run.contents[key] = content
        run.records[key] = record
        graph_builder.add_record(record)

    # 4. Reference graph
    run.edges = graph_builder.build()
    run.dangling = graph_builder.dangling_references

    # 5. Closure and aggregation
    run.results = resolve(run.edges, run.records.keys(), config, cancel)

    logger.info(
        "Dataset %d: %d rows, %d elements, %d edges",
        dataset_id,
        len(rows),
        len(run.records),
        len(run.edges),
    )

    if config.purge_intermediate:
        run.purge()
    return run


__all__ = ["ParseRun", "run_parse"]
