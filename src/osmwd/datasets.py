"""Dataset registry - Curators and sources of regional dumps.

Each dataset is one regional dump (typically a country, abbreviated with its
ISO 3166-1 alpha-2 code) with the name of the collective curating it. The
registry assigns the integer dataset ids that key every element.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import date
from typing import Any

DEFAULT_NAME = "Installation tests, CHANGE this title"
DEFAULT_CURATOR = "no-curation, CHANGE here"
# Offset keeping generated test abbreviations short
_TEST_ABBREV_EPOCH_MS = 153470000000


@dataclass
class Dataset:
    """A registered dataset.

    Attributes:
        id: Positive dataset id.
        abbrev: Unique abbreviation (e.g., "LI").
        name: Region or curator project name.
        curator: Collective responsible for checks and endorsements.
        created: Registration date.
        info: Free metadata (e.g., ``osmium fileinfo -e`` output).
    """

    id: int
    abbrev: str
    name: str
    curator: str
    created: date = field(default_factory=date.today)
    info: dict[str, Any] | None = None


def _test_abbrev() -> str:
    return f"inst-test-num{round(time.time() * 1000) - _TEST_ABBREV_EPOCH_MS}"


class DatasetRegistry:
    """In-memory registry of datasets with sequential ids."""

    def __init__(self) -> None:
        self._datasets: dict[int, Dataset] = {}
        self._next_id = 1

    def register(
        self,
        abbrev: str = "",
        name: str = "",
        curator: str = "",
        info: dict[str, Any] | None = None,
    ) -> int:
        """Register a dataset and return its id.

        Blank fields get installation-test defaults.

        Raises:
            ValueError: If the abbreviation is already registered.
        """
        abbrev = abbrev.strip() or _test_abbrev()
        if self.find(abbrev) is not None:
            raise ValueError(f"Dataset abbreviation already registered: {abbrev}")

        dataset = Dataset(
            id=self._next_id,
            abbrev=abbrev,
            name=name.strip() or DEFAULT_NAME,
            curator=curator.strip() or DEFAULT_CURATOR,
            info=info,
        )
        self._datasets[dataset.id] = dataset
        self._next_id += 1
        return dataset.id

    def restore(self, dataset_id: int, abbrev: str, name: str = "", curator: str = "") -> Dataset:
        """Re-add a dataset known under an existing id (e.g. from a saved store).

        Later registrations continue after the highest id seen.

        Raises:
            ValueError: If the id or the abbreviation is already registered.
        """
        if dataset_id in self._datasets:
            raise ValueError(f"Dataset id already registered: {dataset_id}")
        if self.find(abbrev) is not None:
            raise ValueError(f"Dataset abbreviation already registered: {abbrev}")

        dataset = Dataset(
            id=dataset_id,
            abbrev=abbrev,
            name=name or DEFAULT_NAME,
            curator=curator or DEFAULT_CURATOR,
        )
        self._datasets[dataset_id] = dataset
        self._next_id = max(self._next_id, dataset_id + 1)
        return dataset

    def get(self, dataset_id: int) -> Dataset | None:
        return self._datasets.get(dataset_id)

    def get_abbrev(self, dataset_id: int) -> str | None:
        dataset = self._datasets.get(dataset_id)
        return dataset.abbrev if dataset else None

    def find(self, abbrev: str) -> Dataset | None:
        """Find a dataset by abbreviation."""
        for dataset in self._datasets.values():
            if dataset.abbrev == abbrev:
                return dataset
        return None

    def __len__(self) -> int:
        return len(self._datasets)


__all__ = ["DEFAULT_CURATOR", "DEFAULT_NAME", "Dataset", "DatasetRegistry"]
