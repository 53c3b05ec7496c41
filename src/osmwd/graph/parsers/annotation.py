"""AnnotationParser - Splits element annotation strings into tokens.

An annotation string is a loose list of kind-prefixed fragments, e.g.::

    Q42 cu0qgbz9dns1 tboundary n10,n11;w12

Fragments are separated by any run of whitespace, comma, semicolon, colon
or dash. Parsing is total: malformed fragments become free-text tokens and
no input raises.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator

from osmwd.graph.parsers import (
    CENTROID_KIND,
    IDENTIFIER_KIND,
    RESERVED_KINDS,
    ParseContext,
    ParsedContent,
    Token,
)

SEPARATOR_PATTERN = re.compile(r"[\s,;:\-]+")
# Base32 alphabet of geohash centroids
GEOHASH_CHARS = frozenset("0123456789bcdefghjkmnpqrstuvwxyz")
_DIGITS = re.compile(r"[0-9]+")


def split_fragments(text: str) -> Iterator[str]:
    """Yield the non-empty fragments of an annotation string."""
    for fragment in SEPARATOR_PATTERN.split(text or ""):
        if fragment:
            yield fragment


def _absorbs(kind: str, fragment: str) -> bool:
    """True if a detached ``kind`` prefix takes ``fragment`` as its payload.

    A lone ``Q`` only takes a run of digits. A lone ``c`` only takes a
    geohash-looking fragment that is not itself an integer token.
    """
    if kind == IDENTIFIER_KIND:
        return _DIGITS.fullmatch(fragment) is not None
    if kind == CENTROID_KIND:
        if fragment in RESERVED_KINDS or Token.from_fragment(fragment).is_int:
            return False
        return set(fragment) <= GEOHASH_CHARS
    return False


def tokenize(text: str) -> Iterator[Token]:
    """Lazily decode an annotation string into tokens.

    A fragment made only of a reserved kind letter (``"c"`` or ``"Q"``) is a
    detached prefix. It takes the next fragment as its payload when that
    fragment fits the kind, so ``"c u0qgbz9dns1"`` decodes like
    ``"cu0qgbz9dns1"`` and ``"Q 42"`` like ``"Q42"``. Otherwise the prefix
    is yielded as a token with an empty payload and the next fragment is
    decoded on its own (``"Q n10"`` keeps the reference ``n10``).

    Args:
        text: Raw annotation string (may be empty).

    Yields:
        Tokens in input order.
    """
    pending_kind: str | None = None
    for fragment in split_fragments(text):
        if pending_kind is not None:
            kind, pending_kind = pending_kind, None
            if _absorbs(kind, fragment):
                yield Token(kind=kind, payload=fragment)
                continue
            yield Token(kind=kind, payload="")

        if fragment in RESERVED_KINDS:
            pending_kind = fragment
        else:
            yield Token.from_fragment(fragment)

    if pending_kind is not None:
        # Trailing prefix with nothing to absorb
        yield Token(kind=pending_kind, payload="")


class AnnotationParser:
    """Parser for the annotation strings of one element.

    Collapses identical tokens to their first occurrence, so an element
    listed twice in a dump (or a member repeated in its list) yields the
    same tokens as a clean row.
    """

    def parse(self, texts: Iterable[str], context: ParseContext) -> ParsedContent:
        """Parse all annotation strings of an element.

        Args:
            texts: Annotation strings of the element, in input order.
            context: Parsing context carrying the element key.

        Returns:
            ParsedContent with distinct tokens in first-seen order.
        """
        texts = list(texts)
        seen: set[Token] = set()
        tokens: list[Token] = []
        for text in texts:
            for token in tokenize(text):
                if token not in seen:
                    seen.add(token)
                    tokens.append(token)

        return ParsedContent(key=context.key, raw_text="\n".join(texts), tokens=tokens)


__all__ = [
    "AnnotationParser",
    "GEOHASH_CHARS",
    "SEPARATOR_PATTERN",
    "split_fragments",
    "tokenize",
]
