"""
osmwd.commands.parse_cmd - Parse a raw dump and resolve identifiers.

Loads the raw CSV of one dataset, runs the resolution pipeline, stores the
element table and writes the CSV outputs.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any


def _resolver_settings(config: dict[str, Any], args: argparse.Namespace) -> dict[str, Any]:
    """Resolver table with command-line overrides applied."""
    settings = dict(config.get("resolver", {}))
    if args.method:
        settings["strategy"] = args.method
    if args.stop_level is not None:
        settings["max_depth"] = args.stop_level
    if args.keep_intermediate:
        settings["purge_intermediate"] = False
    return settings


def run(args: argparse.Namespace) -> int:
    """Run the parse command."""
    from osmwd.config import get_config
    from osmwd.datasets import DatasetRegistry
    from osmwd.export import write_csv_outputs
    from osmwd.graph.factory import run_parse
    from osmwd.graph.resolver import ResolverConfig
    from osmwd.ingest import raw_csv_path, read_raw_csv
    from osmwd.store import RecordStore

    try:
        config = get_config(getattr(args, "config", None))
    except (OSError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    # Fail fast on a bad resolver configuration, before reading any row
    try:
        resolver_config = ResolverConfig.from_dict(_resolver_settings(config, args))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    input_cfg = config.get("input", {})
    export_cfg = config.get("export", {})
    dataset_cfg = config.get("dataset", {})
    name = args.name or export_cfg.get("name", "TMP")

    input_path = args.input or raw_csv_path(
        name,
        args.input_dir or input_cfg.get("path", "/tmp"),
        input_cfg.get("suffix", ".wdDump.raw.csv"),
    )

    try:
        rows = read_raw_csv(input_path)
    except FileNotFoundError:
        print(f"Error: input file not found: {input_path}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error reading {input_path}: {e}", file=sys.stderr)
        return 1

    store_path = args.store or (Path(p) if (p := config.get("store", {}).get("path")) else None)
    store = RecordStore.load(store_path) if store_path else RecordStore()

    registry = DatasetRegistry()
    for stored_id in store.datasets():
        registry.restore(stored_id, store.abbrev(stored_id) or f"stored-{stored_id}")

    # A dataset parsed again keeps its id and is rebuilt in place
    abbrev = (args.abbrev or dataset_cfg.get("abbrev") or args.name or "").strip()
    existing = registry.find(abbrev) if abbrev else None
    if existing is not None:
        dataset_id = existing.id
    else:
        dataset_id = registry.register(
            abbrev=abbrev,
            name=args.title or dataset_cfg.get("name", ""),
            curator=args.curator or dataset_cfg.get("curator", ""),
        )

    parse_run = run_parse(rows, dataset_id=dataset_id, config=resolver_config)
    output_rows = parse_run.output_rows()
    store.replace_dataset(dataset_id, output_rows, abbrev=registry.get_abbrev(dataset_id))
    if store_path:
        store.save(store_path)

    outputs: list[str] = []
    export_enabled = export_cfg.get("enabled", True) and not args.no_export
    if export_enabled:
        output_dir = args.output_dir or export_cfg.get("path", "/tmp")
        outputs = [str(p) for p in write_csv_outputs(output_rows, name, output_dir)]

    summary = parse_run.summary()
    summary["abbrev"] = registry.get_abbrev(dataset_id)
    summary["input"] = str(input_path)
    summary["outputs"] = outputs

    if args.json:
        print(json.dumps(summary, indent=2))
    elif not args.quiet:
        _print_summary(summary)
    return 0


def _print_summary(summary: dict[str, Any]) -> None:
    print(f"Dataset {summary['dataset']} ({summary['abbrev']}) from {summary['input']}")
    print(f"  Method: {summary['strategy']} (max depth {summary['max_depth']})")
    print(f"  Elements: {summary['elements']} ({summary['with_wd_id']} with Wikidata id)")
    print(
        f"  References: {summary['valid_refs']} of {summary['original_refs']} valid"
        f" ({summary['dangling_refs']} dangling)"
    )
    print(f"  With member candidates: {summary['with_members']}")
    print(f"  Suspects (no Wikidata id): {summary['suspects']}")
    if summary["outputs"]:
        print("  Files:")
        for path in summary["outputs"]:
            print(f"    {path}")
