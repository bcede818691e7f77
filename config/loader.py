"""Configuration loading utilities."""

import json
import logging
import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Any

from .bus_config import BusConfig
from .defaults import GLOBAL_CONFIG_DIR, GLOBAL_CONFIG_FILENAME, LOG_LEVEL_ENV, PROJECT_CONFIG_FILENAMES

logger = logging.getLogger(__name__)


# A JSON string literal, or a single-line or multi-line comment
_JSONC_TOKEN = re.compile(r'("(?:\\.|[^"\\])*")|//[^\n]*|/\*.*?\*/', re.DOTALL)


def strip_jsonc_comments(content: str) -> str:
    """
    Strip comments from JSONC content to convert to valid JSON.

    Handles:
    - Single-line comments: // comment
    - Multi-line comments: /* comment */

    Comment markers inside string values (for example URLs) are kept.

    Args:
        content: JSONC content string

    Returns:
        JSON string with comments removed
    """
    return _JSONC_TOKEN.sub(lambda match: match.group(1) or "", content)


def load_config_file(path: Path) -> dict[str, Any] | None:
    """
    Load a config file from the given path.

    Supports both .json and .jsonc files with comment stripping.

    Args:
        path: Path to the config file

    Returns:
        Parsed config dictionary or None if the file doesn't exist or
        cannot be parsed
    """
    if not path.exists():
        return None

    try:
        content = path.read_text()
        if path.suffix == ".jsonc":
            content = strip_jsonc_comments(content)
        data = json.loads(content)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to load config from %s: %s", path, e)
        return None

    if not isinstance(data, dict):
        logger.warning("Ignoring config at %s: top level must be an object", path)
        return None
    return data


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two configuration dictionaries.

    Args:
        base: Base configuration
        override: Override configuration (takes precedence)

    Returns:
        Merged configuration dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def load_config(project_root: Path | None = None, home: Path | None = None) -> BusConfig:
    """
    Load configuration from multiple sources with precedence.

    Sources, lowest precedence first:
    1. Global: ~/.serializable/bridge.jsonc
    2. Project-level: the first of bridge.jsonc, bridge.json,
       .serializable/bridge.jsonc found in the project root
    3. The LOG_LEVEL environment variable (log_level only)

    Args:
        project_root: Project root directory (defaults to current working directory)
        home: Home directory for the global config (defaults to the user's home)

    Returns:
        Loaded and merged BusConfig model
    """
    if project_root is None:
        project_root = Path.cwd()
    if home is None:
        home = Path.home()

    global_config_path = home / GLOBAL_CONFIG_DIR / GLOBAL_CONFIG_FILENAME
    config_data = load_config_file(global_config_path) or {}

    for filename in PROJECT_CONFIG_FILENAMES:
        project_config = load_config_file(project_root / filename)
        if project_config:
            config_data = merge_configs(config_data, project_config)
            break

    env_level = os.environ.get(LOG_LEVEL_ENV)
    if env_level:
        config_data["log_level"] = env_level

    return BusConfig(**config_data)


@lru_cache(maxsize=1)
def get_config(project_root: Path | None = None) -> BusConfig:
    """
    Get cached configuration.

    This function caches the config to avoid repeated file I/O.
    To reload the config, clear the cache with get_config.cache_clear().

    Args:
        project_root: Project root directory (defaults to current working directory)

    Returns:
        Cached BusConfig model
    """
    root = project_root or Path.cwd()
    return load_config(root)
