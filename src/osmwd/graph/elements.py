"""Elements - Keys and parsed records for OSM elements.

This module provides the core data structures of a parse run:
- ElementType: Enum of OSM element types (node, way, relation)
- ElementKey: Immutable (type, id, dataset) key of an element
- ElementRecord: The canonical record built from an element's tokens
- RawRow: One input row (type, id, annotation) of a dump
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ElementType(Enum):
    """Types of OSM elements.

    The value is the one-letter code used in dumps and reference tokens.
    """

    NODE = "n"
    WAY = "w"
    RELATION = "r"

    @classmethod
    def parse(cls, text: str) -> ElementType:
        """Parse an element type from its name or one-letter code.

        Only the first character is significant ("node", "n" and "N" are
        all nodes), mirroring how dumps abbreviate the type column.

        Raises:
            ValueError: If the text does not start with n, w or r.
        """
        code = text.strip()[:1].lower()
        for member in cls:
            if member.value == code:
                return member
        raise ValueError(f"Unknown element type: {text!r}")

    @property
    def order(self) -> int:
        """Position in node, way, relation order."""
        return _TYPE_ORDER[self]


_TYPE_ORDER = {ElementType.NODE: 0, ElementType.WAY: 1, ElementType.RELATION: 2}


@dataclass(frozen=True)
class ElementKey:
    """Key of an element within a dataset.

    Attributes:
        type: The element type.
        id: The OSM id, unique within the type namespace.
        dataset: Id of the dataset the element was loaded into.
    """

    type: ElementType
    id: int
    dataset: int = 0

    def __post_init__(self) -> None:
        if self.id < 0:
            raise ValueError(f"Element id must be non-negative, got {self.id}")

    def sort_key(self) -> tuple[int, int, int]:
        """Ordering used for witness lists and output tables."""
        return (self.dataset, self.type.order, self.id)

    def __str__(self) -> str:
        return f"{self.type.value}{self.id}"


@dataclass
class ElementRecord:
    """Canonical record of one element for one parse run.

    Attributes:
        key: The element key.
        wd_id: Direct Wikidata identifier (numeric part of ``Q...``), if tagged.
        centroid: Spatial token (geohash), if tagged.
        feature_type: Free-text summary joined by ``-``; empty when no
            free-text token was observed.
        original_ref_count: Reference tokens seen, valid or not.
        valid_ref_count: Reference tokens whose id passed the known-id filter.
        refs: (token kind, id) of every reference token, first-seen order.
    """

    key: ElementKey
    wd_id: int | None = None
    centroid: str | None = None
    feature_type: str = ""
    original_ref_count: int = 0
    valid_ref_count: int = 0
    refs: tuple[tuple[str, int], ...] = ()

    @property
    def has_wd_id(self) -> bool:
        """True if the element carries its own Wikidata identifier."""
        return self.wd_id is not None

    @property
    def dangling_ref_count(self) -> int:
        """References dropped by the known-id filter."""
        return self.original_ref_count - self.valid_ref_count


@dataclass(frozen=True)
class RawRow:
    """One row of a raw dump.

    Attributes:
        element_type: Type of the element.
        element_id: OSM id of the element.
        annotation: Raw annotation string (identifier, centroid, tags, members).
    """

    element_type: ElementType
    element_id: int
    annotation: str = ""


__all__ = [
    "ElementType",
    "ElementKey",
    "ElementRecord",
    "RawRow",
]
