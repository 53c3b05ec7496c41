"""
osmwd.cli - Command-line interface.

Main entry point for the osmwd CLI tool.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from osmwd import __version__
from osmwd.commands import config_cmd, parse_cmd


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="osmwd",
        description="Associate OSM elements with Wikidata identifiers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  osmwd parse --name LI                 # Parse /tmp/LI.wdDump.raw.csv (fast method)
  osmwd parse LI.csv --method complete  # Bounded closure over ancestors
  osmwd parse --name LI --stop-level 3  # Shorter ancestor paths
  osmwd parse --name LI -j --no-export  # JSON summary, no CSV files

Configuration:
  osmwd config path                     # Show config file location
  osmwd config show                     # View all settings

For detailed command help: osmwd <command> --help
        """,
    )

    # Global options
    parser.add_argument(
        "--version",
        action="version",
        version=f"osmwd {__version__}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file",
        metavar="PATH",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress non-error output",
    )

    # Subcommands
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # parse command
    parse_parser = subparsers.add_parser(
        "parse",
        help="Parse a raw dump and resolve Wikidata identifiers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Input:
  A CSV with the header osm_type,osm_id,other_ids. Without INPUT the file
  <input-dir>/<NAME>.wdDump.raw.csv is read.

Output:
  <output-dir>/<NAME>.wdDump.csv   elements with a Wikidata identifier
  <output-dir>/<NAME>.noWdId.csv   elements with member candidates only
""",
    )
    parse_parser.add_argument(
        "input",
        nargs="?",
        type=Path,
        help="Raw dump CSV (default: derived from --name and --input-dir)",
    )
    parse_parser.add_argument(
        "--name",
        help="Dataset name, e.g. the ISO two-letter code LI",
    )
    parse_parser.add_argument(
        "--input-dir",
        type=Path,
        help="Folder of raw dump files",
        metavar="DIR",
    )
    parse_parser.add_argument(
        "--method",
        choices=["fast", "complete"],
        help="Closure strategy: fast (adjacency) or complete (bounded closure)",
    )
    parse_parser.add_argument(
        "--stop-level",
        type=int,
        help="Maximum ancestor path length for the complete method",
        metavar="N",
    )
    parse_parser.add_argument(
        "--keep-intermediate",
        action="store_true",
        help="Keep token and edge tables after the run",
    )
    parse_parser.add_argument(
        "--output-dir",
        type=Path,
        help="Folder for the CSV outputs",
        metavar="DIR",
    )
    parse_parser.add_argument(
        "--no-export",
        action="store_true",
        help="Do not write CSV outputs",
    )
    parse_parser.add_argument(
        "--store",
        type=Path,
        help="JSON record store to update with the results",
        metavar="FILE",
    )
    parse_parser.add_argument(
        "--abbrev",
        help="Dataset abbreviation for the registry (default: --name)",
    )
    parse_parser.add_argument(
        "--title",
        help="Dataset title (region or curator project name)",
    )
    parse_parser.add_argument(
        "--curator",
        help="Collective responsible for the dataset",
    )
    parse_parser.add_argument(
        "-j",
        "--json",
        action="store_true",
        help="Output run summary as JSON",
    )

    # config command
    config_parser = subparsers.add_parser(
        "config",
        help="Show configuration",
    )
    config_parser.add_argument(
        "config_action",
        choices=["show", "path"],
        help="show: print merged settings, path: print config file location",
    )

    # version command
    subparsers.add_parser(
        "version",
        help="Show version",
    )

    return parser


def _configure_logging(args: argparse.Namespace) -> None:
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()

    # Enable shell tab-completion if argcomplete is installed
    try:
        import argcomplete

        argcomplete.autocomplete(parser)
    except ImportError:
        pass

    args = parser.parse_args(argv)
    _configure_logging(args)

    # Handle no command
    if not args.command:
        parser.print_help()
        return 0

    try:
        if args.command == "parse":
            return parse_cmd.run(args)
        elif args.command == "config":
            return config_cmd.run(args)
        elif args.command == "version":
            print(f"osmwd {__version__}")
            return 0
        else:
            parser.print_help()
            return 1
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
