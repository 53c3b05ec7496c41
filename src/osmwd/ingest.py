"""
osmwd.ingest - Raw dump CSV reading.

Reads ``<NAME>.wdDump.raw.csv`` files with the columns
``osm_type,osm_id,other_ids`` into RawRows for the parse pipeline.
"""

import csv
import logging
from pathlib import Path
from typing import Iterator, List, Union

from osmwd.graph.elements import ElementType, RawRow

logger = logging.getLogger(__name__)

RAW_SUFFIX = ".wdDump.raw.csv"
RAW_COLUMNS = ("osm_type", "osm_id", "other_ids")


def normalize_name(name: str) -> str:
    """Dataset file names are trimmed and upper-cased ("li " -> "LI")."""
    return name.strip().upper()


def raw_csv_path(
    name: str = "TMP",
    path: Union[str, Path] = "/tmp",
    suffix: str = RAW_SUFFIX,
) -> Path:
    """Build the path of a raw dump file.

    Args:
        name: Dataset name, e.g. the ISO two-letter code "LI".
        path: Folder holding the dump files.
        suffix: File suffix after the name.

    Returns:
        Path like ``/tmp/LI.wdDump.raw.csv``.
    """
    return Path(path) / f"{normalize_name(name)}{suffix}"


def parse_row(row: dict) -> RawRow:
    """Convert one CSV record into a RawRow.

    Raises:
        ValueError: If the type is unknown or the id is not a non-negative integer.
    """
    element_type = ElementType.parse(row.get("osm_type") or "")
    raw_id = (row.get("osm_id") or "").strip()
    if not raw_id.isdigit():
        raise ValueError(f"Invalid element id: {raw_id!r}")
    return RawRow(
        element_type=element_type,
        element_id=int(raw_id),
        annotation=row.get("other_ids") or "",
    )


def iter_raw_rows(lines) -> Iterator[RawRow]:
    """Yield RawRows from CSV text lines (header required).

    Rows with an unknown type or an invalid id are skipped with a warning.
    """
    reader = csv.DictReader(lines)
    missing = [c for c in RAW_COLUMNS if c not in (reader.fieldnames or [])]
    if missing:
        raise ValueError(f"Raw dump is missing columns: {', '.join(missing)}")

    for line_no, row in enumerate(reader, start=2):
        try:
            yield parse_row(row)
        except ValueError as e:
            logger.warning("Skipping raw row at line %d: %s", line_no, e)


def read_raw_csv(path: Union[str, Path]) -> List[RawRow]:
    """Read all rows of a raw dump file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If required columns are missing.
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8", newline="") as f:
        rows = list(iter_raw_rows(f))
    logger.info("Read %d raw rows from %s", len(rows), path)
    return rows
