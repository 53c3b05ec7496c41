"""Tests for metrics.py - Candidate aggregation."""

from osmwd.graph.metrics import MISSING_WD_ID, Candidate, ClosureResult, aggregate_candidates
from tests.core.graph_test_helpers import members_string, node, relation, way, witnesses_string


class TestCandidate:
    def test_bucket(self):
        assert Candidate(42, way(1)).bucket == 42
        assert Candidate(None, way(1)).bucket == MISSING_WD_ID


class TestAggregateCandidates:
    """Tests for aggregate_candidates()."""

    def test_empty(self):
        result = aggregate_candidates([])

        assert result.is_empty
        assert result.members == {}
        assert result.witnesses == ()
        assert result.member_max == 0

    def test_single_candidate_has_no_witness(self):
        result = aggregate_candidates([Candidate(42, way(100))])

        assert members_string(result) == "Q42:1"
        assert result.witnesses == ()

    def test_repeated_identifier_yields_witnesses(self):
        result = aggregate_candidates(
            [Candidate(42, way(200)), Candidate(7, relation(1)), Candidate(42, way(100))]
        )

        assert members_string(result) == "Q7:1,Q42:2"
        assert witnesses_string(result) == "w100,w200"

    def test_missing_identifier_is_its_own_bucket(self):
        result = aggregate_candidates(
            [Candidate(None, way(1)), Candidate(None, way(2)), Candidate(5, way(3))]
        )

        assert result.members == {0: 2, 5: 1}
        assert witnesses_string(result) == "w1,w2"

    def test_witnesses_sorted_by_type_then_id(self):
        result = aggregate_candidates(
            [Candidate(5, relation(1)), Candidate(5, node(9)), Candidate(5, way(3))]
        )
        assert witnesses_string(result) == "n9,w3,r1"

    def test_witnesses_distinct(self):
        result = aggregate_candidates([Candidate(5, way(1)), Candidate(5, way(1))])

        assert result.members == {5: 2}
        assert result.witnesses == (way(1),)

    def test_pure_function(self):
        candidates = [Candidate(5, way(1)), Candidate(5, way(2))]
        assert aggregate_candidates(candidates) == aggregate_candidates(list(candidates))


class TestClosureResult:
    """Tests for ClosureResult helpers."""

    def test_member_max(self):
        assert ClosureResult().member_max == 0
        assert ClosureResult(members={1: 3, 2: 1}).member_max == 3
