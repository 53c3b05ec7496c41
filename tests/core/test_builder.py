"""Tests for builder.py - Element records and reference graph construction."""

from osmwd.graph.builder import RecordBuilder, ReferenceGraphBuilder
from osmwd.graph.known_ids import KnownIdFilter
from osmwd.graph.parsers import ParseContext
from osmwd.graph.parsers.annotation import AnnotationParser
from osmwd.graph.relations import DanglingReference
from tests.core.graph_test_helpers import edges_string, node, relation, way


def build_record(key, *texts, known=()):
    content = AnnotationParser().parse(texts, ParseContext(key=key))
    return RecordBuilder(KnownIdFilter(known)).build(content)


class TestRecordBuilder:
    """Tests for RecordBuilder.build()."""

    def test_way_with_identifier_centroid_and_members(self):
        record = build_record(way(100), "Q42 c u0qgbz9dns1 n10 n11", known=[100, 10, 11])

        assert record.key == way(100)
        assert record.wd_id == 42
        assert record.centroid == "u0qgbz9dns1"
        assert record.feature_type == ""
        assert record.original_ref_count == 2
        assert record.valid_ref_count == 2
        assert record.refs == (("n", 10), ("n", 11))

    def test_max_identifier_wins(self):
        """Several Q tokens resolve to the largest number, not the first."""
        record = build_record(way(1), "Q7 Q42 Q9")
        assert record.wd_id == 42

    def test_identifier_compared_numerically(self):
        record = build_record(way(1), "Q9 Q10")
        assert record.wd_id == 10

    def test_identifier_order_independent(self):
        assert build_record(way(1), "Q42 Q7").wd_id == build_record(way(1), "Q7 Q42").wd_id

    def test_malformed_identifier_ignored(self):
        record = build_record(way(1), "Qabc")
        assert record.wd_id is None
        assert record.feature_type == ""

    def test_max_centroid_wins(self):
        record = build_record(node(1), "cabc cabd")
        assert record.centroid == "abd"

    def test_empty_centroid_ignored(self):
        record = build_record(node(1), "n10 c")
        assert record.centroid is None

    def test_free_text_first_seen_order(self):
        record = build_record(relation(1), "tboundary n10 tadmin")
        assert record.feature_type == "boundary-admin"

    def test_no_free_text_is_empty_string(self):
        record = build_record(relation(1), "Q1 n10")
        assert record.feature_type == ""

    def test_unknown_kind_integer_counts_as_reference(self):
        record = build_record(relation(1), "x5", known=[5])
        assert record.refs == (("x", 5),)
        assert record.valid_ref_count == 1

    def test_unknown_reference_counted_but_not_valid(self):
        record = build_record(way(100), "Q42 n10 n999", known=[100, 10])

        assert record.original_ref_count == 2
        assert record.valid_ref_count == 1

    def test_repeated_reference_counted_once(self):
        record = build_record(way(100), "n10 n10", "n10", known=[10])
        assert record.original_ref_count == 1

    def test_lone_identifier_prefix_keeps_references(self):
        record = build_record(way(100), "Q n10 n11", known=[100, 10, 11])

        assert record.wd_id is None
        assert record.refs == (("n", 10), ("n", 11))
        assert record.original_ref_count == 2
        assert record.valid_ref_count == 2

    def test_lone_centroid_prefix_keeps_free_text(self):
        record = build_record(way(100), "Q42 c tboundary")

        assert record.centroid is None
        assert record.feature_type == "boundary"

    def test_empty_annotation(self):
        record = build_record(node(10), "")

        assert record.wd_id is None
        assert record.centroid is None
        assert record.original_ref_count == 0
        assert record.refs == ()


class TestReferenceGraphBuilder:
    """Tests for ReferenceGraphBuilder."""

    def _build(self, records, known):
        builder = ReferenceGraphBuilder(KnownIdFilter(known))
        for record in records:
            builder.add_record(record)
        return builder, builder.build()

    def test_edges_carry_container_identifier(self):
        known = [100, 10, 11]
        records = [
            build_record(way(100), "Q42 c u0qgbz9dns1 n10 n11", known=known),
            build_record(node(10), known=known),
            build_record(node(11), known=known),
        ]

        builder, edges = self._build(records, known)

        assert edges_string(edges) == "w100->n10,w100->n11"
        assert {e.wd_id for e in edges} == {42}
        assert builder.dangling_references == []

    def test_container_without_identifier(self):
        known = [100, 10]
        records = [build_record(way(100), "n10"), build_record(node(10))]

        _, edges = self._build(records, known)

        assert [e.wd_id for e in edges] == [None]

    def test_unknown_id_is_dangling(self):
        known = [100, 10]
        records = [build_record(way(100), "Q42 n10 n999", known=known), build_record(node(10))]

        builder, edges = self._build(records, known)

        assert edges_string(edges) == "w100->n10"
        assert builder.dangling_references == [DanglingReference(way(100), "n", 999)]

    def test_reference_resolves_to_matching_type(self):
        known = [5, 1]
        records = [
            build_record(node(5)),
            build_record(way(5)),
            build_record(relation(1), "w5"),
        ]

        _, edges = self._build(records, known)

        assert edges_string(edges) == "r1->w5"

    def test_reference_with_mismatched_type_uses_present_element(self):
        """The filter ignores types, so n5 reaches way 5 when no node 5 exists."""
        known = [5, 1]
        records = [build_record(way(5)), build_record(relation(1), "n5", known=known)]

        _, edges = self._build(records, known)

        assert edges_string(edges) == "r1->w5"
        assert records[1].valid_ref_count == 1

    def test_unknown_kind_falls_back_to_type_order(self):
        known = [5, 1]
        records = [
            build_record(relation(5)),
            build_record(way(5)),
            build_record(relation(1), "x5"),
        ]

        _, edges = self._build(records, known)

        assert edges_string(edges) == "r1->w5"

    def test_known_id_without_record_is_dangling(self):
        builder, edges = self._build([build_record(way(1), "n7")], known=[1, 7])

        assert len(edges) == 0
        assert builder.dangling_references == [DanglingReference(way(1), "n", 7)]

    def test_self_reference_kept_as_edge(self):
        records = [build_record(relation(1), "Q1 r1")]
        _, edges = self._build(records, known=[1])

        assert edges_string(edges) == "r1->r1"
        assert next(iter(edges)).is_self_loop

    def test_rebuild_resets_dangling(self):
        builder = ReferenceGraphBuilder(KnownIdFilter([1]))
        builder.add_record(build_record(way(1), "n9"))
        builder.build()
        builder.build()

        assert len(builder.dangling_references) == 1
