"""Pytest fixtures for core tests."""

import pytest


@pytest.fixture
def scenario_rows():
    """Way 100 tagged Q42 with nodes 10 and 11 as members."""
    from tests.core.graph_test_helpers import raw

    return [
        raw("w", 100, "Q42 c u0qgbz9dns1 n10 n11"),
        raw("n", 10),
        raw("n", 11),
    ]


@pytest.fixture
def chain_edges():
    """Relation chain r3 (Q3) -> r2 (Q2) -> r1 (Q1) -> n1."""
    from tests.core.graph_test_helpers import edge, edge_set, node, relation

    return edge_set(
        edge(relation(1), node(1), 1),
        edge(relation(2), relation(1), 2),
        edge(relation(3), relation(2), 3),
    )
