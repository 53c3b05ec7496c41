"""
osmwd.commands.config_cmd - Show configuration.
"""

import argparse
import sys

import tomlkit


def run(args: argparse.Namespace) -> int:
    """Run the config command."""
    from osmwd.config import find_config_file, get_config

    if args.config_action == "path":
        path = args.config or find_config_file()
        if path is None:
            print("No .osmwd.toml found (using defaults)")
            return 1
        print(path)
        return 0

    try:
        config = get_config(args.config)
    except (OSError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    print(tomlkit.dumps(config), end="")
    return 0
