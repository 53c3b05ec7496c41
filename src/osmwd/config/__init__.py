"""
osmwd.config - Configuration loading and defaults

Configuration comes from ``.osmwd.toml`` (found by walking up from the
working directory), deep-merged over DEFAULT_CONFIG, then overridden by
``OSMWD_<SECTION>_<KEY>`` environment variables.
"""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any

import tomlkit

from osmwd.config.defaults import CONFIG_FILENAME, DEFAULT_CONFIG

ENV_PREFIX = "OSMWD_"


def find_config_file(start: Path | None = None) -> Path | None:
    """Find the configuration file in ``start`` or a parent directory.

    Args:
        start: Directory to start from (defaults to cwd).

    Returns:
        Path to ``.osmwd.toml``, or None if not found.
    """
    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if current == current.parent:
            return None
        current = current.parent


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge ``override`` into a copy of ``base``.

    Nested tables are merged key by key; any other value in ``override``
    replaces the base value.
    """
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_config(config_path: Path) -> dict[str, Any]:
    """Load a TOML configuration file merged over the defaults.

    Raises:
        FileNotFoundError: If the file does not exist.
        tomlkit.exceptions.ParseError: If the file is not valid TOML.
    """
    content = Path(config_path).read_text(encoding="utf-8")
    user_config = tomlkit.parse(content).unwrap()
    return merge_configs(DEFAULT_CONFIG, user_config)


def _try_parse_env_value(value: str) -> Any:
    """Parse an environment value into a typed Python value.

    JSON arrays and objects are decoded (malformed JSON stays a string),
    ``true``/``false`` become booleans, integers become ints, anything else
    is returned unchanged.
    """
    stripped = value.strip()
    if stripped[:1] in ("[", "{"):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            return value
    lowered = stripped.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if stripped.lstrip("-").isdigit():
        return int(stripped)
    return value


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply ``OSMWD_<SECTION>_<KEY>`` environment variables to a config.

    ``OSMWD_RESOLVER_MAX_DEPTH=3`` sets ``config["resolver"]["max_depth"]``.
    The section is the first underscore-separated word; the rest, lowered,
    is the key. Missing sections are created.
    """
    for env_key, env_value in os.environ.items():
        if not env_key.startswith(ENV_PREFIX):
            continue
        parts = env_key[len(ENV_PREFIX) :].lower().split("_", 1)
        if len(parts) != 2 or not parts[0] or not parts[1]:
            continue
        section, key = parts
        table = config.setdefault(section, {})
        if isinstance(table, dict):
            table[key] = _try_parse_env_value(env_value)
    return config


def get_config(config_path: Path | None = None, start_dir: Path | None = None) -> dict[str, Any]:
    """Resolve the effective configuration.

    Args:
        config_path: Explicit configuration file (optional).
        start_dir: Directory to search from when no path is given.

    Returns:
        Configuration dictionary with defaults and env overrides applied.
    """
    if config_path is None:
        config_path = find_config_file(start_dir)

    if config_path is not None:
        config = load_config(config_path)
    else:
        config = copy.deepcopy(DEFAULT_CONFIG)

    return _apply_env_overrides(config)


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_CONFIG",
    "find_config_file",
    "get_config",
    "load_config",
    "merge_configs",
]
