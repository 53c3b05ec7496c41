"""Tests for CSV export."""

import csv
import json
from io import StringIO

from osmwd.export import generate_suspects_csv, generate_wd_dump_csv, write_csv_outputs
from osmwd.graph.elements import ElementKey, ElementType
from osmwd.store import OutputRow


def _rows():
    return [
        OutputRow(key=ElementKey(ElementType.WAY, 100), wd_id=42, centroid="u0qgbz9dns1"),
        OutputRow(key=ElementKey(ElementType.NODE, 10), members={42: 1}),
        OutputRow(key=ElementKey(ElementType.NODE, 11)),
        OutputRow(key=ElementKey(ElementType.RELATION, 7), wd_id=7, members={1: 2}),
    ]


class TestGenerateWdDumpCsv:
    """Tests for the main dump CSV."""

    def test_only_rows_with_identifier(self):
        assert generate_wd_dump_csv(_rows()) == (
            "osm_type,osm_id,wd_id,centroid\n"
            "w,100,Q42,u0qgbz9dns1\n"
            "r,7,Q7,\n"
        )

    def test_empty(self):
        assert generate_wd_dump_csv([]) == "osm_type,osm_id,wd_id,centroid\n"


class TestGenerateSuspectsCsv:
    """Tests for the suspects CSV."""

    def test_only_suspects(self):
        records = list(csv.DictReader(StringIO(generate_suspects_csv(_rows()))))

        assert len(records) == 1
        assert records[0]["osm_type"] == "n"
        assert records[0]["osm_id"] == "10"
        assert json.loads(records[0]["wd_member_ids"]) == {"Q42": 1}

    def test_members_json_format(self):
        assert '{""Q42"": 1}' in generate_suspects_csv(_rows())


class TestWriteCsvOutputs:
    def test_writes_both_files(self, tmp_path):
        out = tmp_path / "out"

        dump_path, suspects_path = write_csv_outputs(_rows(), "li", out)

        assert dump_path == out / "LI.wdDump.csv"
        assert suspects_path == out / "LI.noWdId.csv"
        assert dump_path.read_text().startswith("osm_type,osm_id,wd_id,centroid\n")
        assert "n,10," in suspects_path.read_text()
