"""Known-id filter - Heuristic check for valid element references.

Dumps are usually cut from a regional extract, so member lists point at
many elements that are not in the file. The filter holds the distinct ids
present in the current raw batch and rejects references to anything else.

The filter works on the bare integer id and ignores the element type: a
reference to node 5 is accepted when only way 5 is in the batch. This
looseness is a known limitation of the heuristic.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

logger = logging.getLogger(__name__)


class KnownIdFilter:
    """Set of element ids known to exist in the current parse run."""

    def __init__(self, ids: Iterable[int] = ()) -> None:
        self._ids: set[int] = set()
        self.rebuild(ids)

    def rebuild(self, ids: Iterable[int]) -> None:
        """Clear the filter and repopulate it from a raw batch.

        Args:
            ids: Element ids of the batch (duplicates allowed).
        """
        self._ids.clear()
        self._ids.update(ids)
        logger.debug("Known-id filter rebuilt with %d distinct ids", len(self._ids))

    def __contains__(self, element_id: object) -> bool:
        return element_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[int]:
        return iter(self._ids)

    def snapshot(self) -> frozenset[int]:
        """Immutable copy of the current id set."""
        return frozenset(self._ids)


__all__ = ["KnownIdFilter"]
