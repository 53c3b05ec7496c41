"""
osmwd.export.csv - CSV generation.

Provides functions to generate the two CSV outputs of a parse run:
- ``<NAME>.wdDump.csv``: elements with a direct Wikidata identifier
- ``<NAME>.noWdId.csv``: suspects, elements without an identifier whose
  related elements suggested candidates
"""

import csv
import json
import logging
from io import StringIO
from pathlib import Path
from typing import Iterable, Tuple, Union

from osmwd.ingest import normalize_name
from osmwd.store import OutputRow, resolved_rows, suspect_rows

logger = logging.getLogger(__name__)

WD_DUMP_SUFFIX = ".wdDump.csv"
SUSPECTS_SUFFIX = ".noWdId.csv"


def generate_wd_dump_csv(rows: Iterable[OutputRow]) -> str:
    """Generate the main dump CSV.

    Args:
        rows: Output rows of one dataset

    Returns:
        CSV string with columns: osm_type, osm_id, wd_id, centroid
        (only rows with a direct identifier, wd_id as ``Q<id>``)
    """
    output = StringIO()
    writer = csv.writer(output, lineterminator="\n")

    writer.writerow(["osm_type", "osm_id", "wd_id", "centroid"])

    for row in resolved_rows(rows):
        writer.writerow([row.key.type.value, row.key.id, row.wd_label, row.centroid or ""])

    return output.getvalue()


def generate_suspects_csv(rows: Iterable[OutputRow]) -> str:
    """Generate the suspects CSV.

    Args:
        rows: Output rows of one dataset

    Returns:
        CSV string with columns: osm_type, osm_id, wd_member_ids
        (rows without a direct identifier but with closure members;
        members as a JSON object like ``{"Q42": 2}``)
    """
    output = StringIO()
    writer = csv.writer(output, lineterminator="\n")

    writer.writerow(["osm_type", "osm_id", "wd_member_ids"])

    for row in suspect_rows(rows):
        members = json.dumps(row.members_json(), separators=(", ", ": "))
        writer.writerow([row.key.type.value, row.key.id, members])

    return output.getvalue()


def write_csv_outputs(
    rows: Iterable[OutputRow],
    name: str = "TMP",
    path: Union[str, Path] = "/tmp",
) -> Tuple[Path, Path]:
    """Write both CSV outputs of a dataset.

    Args:
        rows: Output rows of one dataset
        name: Dataset name used as file prefix (upper-cased)
        path: Output folder (created if missing)

    Returns:
        Paths of the dump file and the suspects file
    """
    rows = list(rows)
    folder = Path(path)
    folder.mkdir(parents=True, exist_ok=True)
    prefix = normalize_name(name)

    dump_path = folder / f"{prefix}{WD_DUMP_SUFFIX}"
    suspects_path = folder / f"{prefix}{SUSPECTS_SUFFIX}"
    dump_path.write_text(generate_wd_dump_csv(rows), encoding="utf-8")
    suspects_path.write_text(generate_suspects_csv(rows), encoding="utf-8")

    logger.info("CSV files saved: %s, %s", dump_path, suspects_path)
    return dump_path, suspects_path
