"""Record store - Output rows of parse runs, per dataset.

Holds one OutputRow per element key and dataset. A parse run replaces the
whole dataset (delete, then insert); rows are never merged with a previous
run. The store can be saved to and loaded from a JSON file.

Public API
----------
- ``OutputRow`` - one element of the output table
- ``RecordStore`` - dataset-partitioned table of output rows
- ``resolved_rows`` / ``suspect_rows`` - the split used by the CSV outputs
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from osmwd.graph.elements import ElementKey, ElementRecord, ElementType
from osmwd.graph.metrics import ClosureResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutputRow:
    """One row of the element table.

    ``members`` and ``witnesses`` are None ("no data") when closure
    resolution found nothing, never empty containers.

    Attributes:
        key: Element key (type, id, dataset).
        wd_id: Direct identifier, or None.
        feature_type: Free-text summary ("" when none observed).
        centroid: Spatial token, or None.
        members: Candidate identifier -> count, or None.
        witnesses: Multiply-corroborated contributing keys, or None.
        original_ref_count: Reference tokens seen in the annotation.
        valid_ref_count: Reference tokens that passed the known-id filter.
    """

    key: ElementKey
    wd_id: int | None = None
    feature_type: str = ""
    centroid: str | None = None
    members: dict[int, int] | None = None
    witnesses: tuple[ElementKey, ...] | None = None
    original_ref_count: int = 0
    valid_ref_count: int = 0

    @classmethod
    def from_record(cls, record: ElementRecord, result: ClosureResult | None) -> OutputRow:
        """Combine a record with its closure result."""
        members = dict(result.members) if result and result.members else None
        witnesses = tuple(result.witnesses) if result and result.witnesses else None
        return cls(
            key=record.key,
            wd_id=record.wd_id,
            feature_type=record.feature_type,
            centroid=record.centroid,
            members=members,
            witnesses=witnesses,
            original_ref_count=record.original_ref_count,
            valid_ref_count=record.valid_ref_count,
        )

    @property
    def wd_label(self) -> str | None:
        """Direct identifier as a Wikidata label (``Q42``)."""
        return f"Q{self.wd_id}" if self.wd_id is not None else None

    @property
    def has_members(self) -> bool:
        return self.members is not None

    @property
    def member_max(self) -> int:
        """Largest member count, 0 without members."""
        return max(self.members.values()) if self.members else 0

    @property
    def is_resolved(self) -> bool:
        """True for elements carrying their own identifier."""
        return self.wd_id is not None

    @property
    def is_suspect(self) -> bool:
        """True for elements with closure candidates but no direct identifier."""
        return not self.is_resolved and self.has_members

    def members_json(self) -> dict[str, int] | None:
        """Members keyed ``Q<id>`` in identifier order."""
        if self.members is None:
            return None
        return {f"Q{wd_id}": n for wd_id, n in sorted(self.members.items())}

    def to_dict(self) -> dict[str, Any]:
        return {
            "osm_type": self.key.type.value,
            "osm_id": self.key.id,
            "sid": self.key.dataset,
            "wd_id": self.wd_id,
            "feature_type": self.feature_type,
            "centroid": self.centroid,
            "wd_member_ids": self.members_json(),
            "used_ref_ids": (
                [[k.type.value, k.id] for k in self.witnesses] if self.witnesses else None
            ),
            "count_origref_ids": self.original_ref_count,
            "count_parseref_ids": self.valid_ref_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OutputRow:
        dataset = int(data.get("sid", 0))
        members = data.get("wd_member_ids")
        witnesses = data.get("used_ref_ids")
        return cls(
            key=ElementKey(ElementType.parse(data["osm_type"]), int(data["osm_id"]), dataset),
            wd_id=data.get("wd_id"),
            feature_type=data.get("feature_type", ""),
            centroid=data.get("centroid"),
            members=(
                {int(label.lstrip("Q")): int(n) for label, n in members.items()}
                if members
                else None
            ),
            witnesses=(
                tuple(ElementKey(ElementType.parse(t), int(i), dataset) for t, i in witnesses)
                if witnesses
                else None
            ),
            original_ref_count=int(data.get("count_origref_ids", 0)),
            valid_ref_count=int(data.get("count_parseref_ids", 0)),
        )


def _ordered(rows: Iterable[OutputRow]) -> list[OutputRow]:
    return sorted(rows, key=lambda r: r.key.sort_key())


def resolved_rows(rows: Iterable[OutputRow]) -> Iterator[OutputRow]:
    """Rows with a direct identifier, ordered by (type, id)."""
    return (r for r in _ordered(rows) if r.is_resolved)


def suspect_rows(rows: Iterable[OutputRow]) -> Iterator[OutputRow]:
    """Rows with closure members but no direct identifier, ordered by (type, id)."""
    return (r for r in _ordered(rows) if r.is_suspect)


class RecordStore:
    """Dataset-partitioned table of output rows."""

    def __init__(self) -> None:
        self._tables: dict[int, dict[ElementKey, OutputRow]] = {}
        self._abbrevs: dict[int, str] = {}

    def replace_dataset(
        self,
        dataset_id: int,
        rows: Iterable[OutputRow],
        abbrev: str | None = None,
    ) -> int:
        """Delete a dataset's rows and insert a new set.

        Args:
            dataset_id: The dataset to replace.
            rows: Rows of the new run; their keys must carry ``dataset_id``.
            abbrev: Dataset abbreviation to remember (optional).

        Returns:
            Number of rows inserted.

        Raises:
            ValueError: If a row belongs to another dataset or a key repeats.
        """
        table: dict[ElementKey, OutputRow] = {}
        for row in rows:
            if row.key.dataset != dataset_id:
                raise ValueError(
                    f"Row {row.key} belongs to dataset {row.key.dataset}, not {dataset_id}"
                )
            if row.key in table:
                raise ValueError(f"Duplicate element key {row.key} in dataset {dataset_id}")
            table[row.key] = row

        previous = self._tables.get(dataset_id)
        if previous:
            logger.info("Dataset %d: replacing %d existing rows", dataset_id, len(previous))
        self._tables[dataset_id] = table
        if abbrev:
            self._abbrevs[dataset_id] = abbrev
        return len(table)

    def delete_dataset(self, dataset_id: int) -> None:
        self._tables.pop(dataset_id, None)
        self._abbrevs.pop(dataset_id, None)

    def has_dataset(self, dataset_id: int) -> bool:
        return dataset_id in self._tables

    def datasets(self) -> list[int]:
        return sorted(self._tables)

    def abbrev(self, dataset_id: int) -> str | None:
        return self._abbrevs.get(dataset_id)

    def find_dataset(self, abbrev: str) -> int | None:
        """Id of the stored dataset with this abbreviation, if any."""
        for dataset_id, stored in self._abbrevs.items():
            if stored == abbrev and dataset_id in self._tables:
                return dataset_id
        return None

    def rows(self, dataset_id: int) -> list[OutputRow]:
        """Rows of a dataset ordered by (type, id).

        Raises:
            KeyError: If the dataset has never been stored.
        """
        if dataset_id not in self._tables:
            raise KeyError(f"Dataset {dataset_id} not in store")
        return _ordered(self._tables[dataset_id].values())

    def get(self, key: ElementKey) -> OutputRow | None:
        return self._tables.get(key.dataset, {}).get(key)

    def iter_resolved(self, dataset_id: int) -> Iterator[OutputRow]:
        """Rows with a direct identifier."""
        return resolved_rows(self.rows(dataset_id))

    def iter_suspects(self, dataset_id: int) -> Iterator[OutputRow]:
        """Rows with closure members but no direct identifier."""
        return suspect_rows(self.rows(dataset_id))

    def save(self, path: Path) -> None:
        """Write all datasets to a JSON file."""
        data = {
            str(dataset_id): {
                "abbrev": self._abbrevs.get(dataset_id),
                "rows": [row.to_dict() for row in self.rows(dataset_id)],
            }
            for dataset_id in self.datasets()
        }
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")

    @classmethod
    def load(cls, path: Path) -> RecordStore:
        """Read a store written by save().

        A missing file yields an empty store.
        """
        store = cls()
        if not path.exists():
            return store
        data = json.loads(path.read_text(encoding="utf-8"))
        for dataset_id, entry in data.items():
            store.replace_dataset(
                int(dataset_id),
                (OutputRow.from_dict(r) for r in entry.get("rows", [])),
                abbrev=entry.get("abbrev"),
            )
        return store


__all__ = ["OutputRow", "RecordStore", "resolved_rows", "suspect_rows"]
