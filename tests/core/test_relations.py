"""Tests for relations.py - Reference edges and the edge set."""

from osmwd.graph.relations import DanglingReference, EdgeSet, ReferenceEdge
from tests.core.graph_test_helpers import edge, edges_string, node, relation, way


class TestReferenceEdge:
    """Tests for ReferenceEdge."""

    def test_create_edge(self):
        e = ReferenceEdge(container=way(100), wd_id=42, referenced=node(10))

        assert e.container == way(100)
        assert e.wd_id == 42
        assert e.referenced == node(10)
        assert not e.is_self_loop

    def test_self_loop(self):
        assert edge(relation(1), relation(1)).is_self_loop

    def test_same_id_different_type_is_not_self_loop(self):
        assert not edge(way(5), node(5)).is_self_loop

    def test_str(self):
        assert str(edge(way(100), node(10), 42)) == "w100 --[Q42]--> n10"
        assert str(edge(way(100), node(10))) == "w100 --[-]--> n10"


class TestDanglingReference:
    def test_str(self):
        assert str(DanglingReference(way(100), "n", 999)) == "w100 --> n999 (missing)"


class TestEdgeSet:
    """Tests for EdgeSet de-duplication and indexes."""

    def test_add_and_iterate(self):
        edges = EdgeSet()
        assert edges.add(edge(way(100), node(10), 42))
        assert edges.add(edge(way(100), node(11), 42))

        assert len(edges) == 2
        assert edges_string(edges) == "w100->n10,w100->n11"

    def test_duplicate_pair_collapses(self):
        """The first edge of a (container, referenced) pair is kept."""
        edges = EdgeSet()
        edges.add(edge(way(100), node(10), 42))

        assert not edges.add(edge(way(100), node(10), 7))
        assert len(edges) == 1
        assert next(iter(edges)).wd_id == 42

    def test_contains(self):
        edges = EdgeSet([edge(way(100), node(10), 42)])

        assert edge(way(100), node(10), 42) in edges
        assert edge(way(100), node(10), 7) not in edges
        assert "w100" not in edges

    def test_outgoing_and_incoming(self):
        edges = EdgeSet(
            [
                edge(way(100), node(10), 42),
                edge(way(200), node(10), 43),
                edge(way(100), node(11), 42),
            ]
        )

        assert [e.referenced for e in edges.iter_outgoing(way(100))] == [node(10), node(11)]
        assert [e.container for e in edges.iter_incoming(node(10))] == [way(100), way(200)]
        assert list(edges.iter_outgoing(node(10))) == []

    def test_containers_and_referenced_keys(self):
        edges = EdgeSet([edge(relation(1), way(100)), edge(way(100), node(10))])

        assert list(edges.containers()) == [relation(1), way(100)]
        assert list(edges.referenced_keys()) == [way(100), node(10)]
        assert edges.is_container(way(100))
        assert not edges.is_container(node(10))

    def test_update(self):
        edges = EdgeSet()
        edges.update([edge(way(1), node(1)), edge(way(1), node(1))])
        assert len(edges) == 1

    def test_clear(self):
        edges = EdgeSet([edge(way(1), node(1))])
        edges.clear()

        assert len(edges) == 0
        assert not edges.is_container(way(1))
        assert list(edges.iter_incoming(node(1))) == []
