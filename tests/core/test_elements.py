"""Tests for elements.py - Element keys, types and records."""

import pytest

from osmwd.graph.elements import ElementKey, ElementRecord, ElementType


class TestElementType:
    """Tests for ElementType parsing and ordering."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("n", ElementType.NODE),
            ("node", ElementType.NODE),
            ("W", ElementType.WAY),
            ("way", ElementType.WAY),
            (" relation", ElementType.RELATION),
        ],
    )
    def test_parse(self, text, expected):
        assert ElementType.parse(text) is expected

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown element type"):
            ElementType.parse("area")

    def test_parse_empty(self):
        with pytest.raises(ValueError):
            ElementType.parse("")

    def test_order(self):
        assert ElementType.NODE.order < ElementType.WAY.order < ElementType.RELATION.order


class TestElementKey:
    """Tests for ElementKey."""

    def test_str(self):
        assert str(ElementKey(ElementType.WAY, 100)) == "w100"

    def test_hashable_and_equal(self):
        a = ElementKey(ElementType.NODE, 10, 1)
        b = ElementKey(ElementType.NODE, 10, 1)
        assert a == b
        assert len({a, b}) == 1

    def test_dataset_distinguishes_keys(self):
        assert ElementKey(ElementType.NODE, 10, 1) != ElementKey(ElementType.NODE, 10, 2)

    def test_type_distinguishes_keys(self):
        assert ElementKey(ElementType.NODE, 10) != ElementKey(ElementType.WAY, 10)

    def test_negative_id_rejected(self):
        with pytest.raises(ValueError):
            ElementKey(ElementType.NODE, -1)

    def test_sort_key_orders_dataset_type_id(self):
        keys = [
            ElementKey(ElementType.RELATION, 1, 1),
            ElementKey(ElementType.NODE, 50, 1),
            ElementKey(ElementType.WAY, 2, 0),
            ElementKey(ElementType.NODE, 7, 1),
        ]
        ordered = sorted(keys, key=ElementKey.sort_key)
        assert [str(k) for k in ordered] == ["w2", "n7", "n50", "r1"]


class TestElementRecord:
    """Tests for ElementRecord derived properties."""

    def test_defaults(self):
        record = ElementRecord(key=ElementKey(ElementType.NODE, 1))
        assert record.wd_id is None
        assert record.centroid is None
        assert record.feature_type == ""
        assert not record.has_wd_id
        assert record.dangling_ref_count == 0

    def test_dangling_ref_count(self):
        record = ElementRecord(
            key=ElementKey(ElementType.WAY, 1),
            original_ref_count=3,
            valid_ref_count=1,
        )
        assert record.dangling_ref_count == 2
