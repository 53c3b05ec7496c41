"""Parsers - Annotation token types and parse results.

This module provides the shared structures for turning the raw annotation
string of an element into typed tokens:
- Token: One kind-prefixed fragment of an annotation string
- ParseContext: Context passed to parsers (element key)
- ParsedContent: All tokens parsed for one element
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from osmwd.graph.elements import ElementKey

# Kinds with a reserved meaning; every other integer token is a reference.
IDENTIFIER_KIND = "Q"
CENTROID_KIND = "c"
RESERVED_KINDS = frozenset({IDENTIFIER_KIND, CENTROID_KIND})

_INTEGER_TOKEN = re.compile(r"^[A-Za-z][0-9]+$")


@dataclass(frozen=True)
class Token:
    """A kind-prefixed fragment of an annotation string.

    Attributes:
        kind: First character of the fragment.
        payload: Remainder of the fragment (may be empty).
    """

    kind: str
    payload: str

    @classmethod
    def from_fragment(cls, fragment: str) -> Token:
        return cls(kind=fragment[:1], payload=fragment[1:])

    @property
    def text(self) -> str:
        """The fragment as it appeared in the annotation."""
        return self.kind + self.payload

    @property
    def is_int(self) -> bool:
        """True for well-formed integer tokens (letter + digits)."""
        return _INTEGER_TOKEN.match(self.text) is not None

    @property
    def is_reference(self) -> bool:
        """True if this token references another element."""
        return self.is_int and self.kind not in RESERVED_KINDS

    @property
    def is_identifier(self) -> bool:
        """True for a well-formed ``Q`` identifier token."""
        return self.is_int and self.kind == IDENTIFIER_KIND

    @property
    def is_centroid(self) -> bool:
        return self.kind == CENTROID_KIND

    @property
    def is_free_text(self) -> bool:
        """True for tokens that only contribute to the free-text summary."""
        return not self.is_reference and self.kind not in RESERVED_KINDS

    @property
    def int_value(self) -> int | None:
        """Numeric payload of an integer token, else None."""
        return int(self.payload) if self.is_int else None


@dataclass
class ParseContext:
    """Context passed to parsers.

    Attributes:
        key: Key of the element whose annotation is parsed.
    """

    key: ElementKey


@dataclass
class ParsedContent:
    """All tokens parsed for one element.

    Attributes:
        key: The element key.
        raw_text: Original annotation text(s), joined by newlines.
        tokens: Distinct tokens in first-seen order.
    """

    key: ElementKey
    raw_text: str
    tokens: list[Token] = field(default_factory=list)

    @property
    def token_count(self) -> int:
        return len(self.tokens)

    def tokens_of_kind(self, kind: str) -> list[Token]:
        """Tokens whose kind equals ``kind``."""
        return [t for t in self.tokens if t.kind == kind]


__all__ = [
    "CENTROID_KIND",
    "IDENTIFIER_KIND",
    "RESERVED_KINDS",
    "Token",
    "ParseContext",
    "ParsedContent",
]
