"""Shared pytest fixtures."""

import os

import pytest


@pytest.fixture(autouse=True)
def clean_osmwd_env(monkeypatch):
    """Keep OSMWD_* variables of the calling shell out of the tests."""
    for name in list(os.environ):
        if name.startswith("OSMWD_"):
            monkeypatch.delenv(name)


@pytest.fixture
def raw_dump(tmp_path):
    """Raw dump ``LI.wdDump.raw.csv`` in a temporary folder."""
    path = tmp_path / "LI.wdDump.raw.csv"
    path.write_text(
        "osm_type,osm_id,other_ids\n"
        "w,100,Q42 c u0qgbz9dns1 n10 n11 n999\n"
        "n,10,\n"
        "n,11,tpeak\n",
        encoding="utf-8",
    )
    return path
