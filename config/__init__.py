"""
Configuration module for the serializable bridge.

Exports the configuration model and loader functions.
"""

from .bus_config import BusConfig
from .defaults import DEFAULT_LOG_LEVEL, LOG_LEVEL_ENV
from .loader import get_config, load_config, load_config_file, merge_configs, strip_jsonc_comments

__all__ = [
    # Constants
    "DEFAULT_LOG_LEVEL",
    "LOG_LEVEL_ENV",
    # Config models
    "BusConfig",
    # Loader functions
    "load_config",
    "get_config",
    "load_config_file",
    "merge_configs",
    "strip_jsonc_comments",
]
