"""Default configuration values."""

DEFAULT_LOG_LEVEL = "INFO"

# Config file locations, lowest precedence first
GLOBAL_CONFIG_DIR = ".serializable"
GLOBAL_CONFIG_FILENAME = "bridge.jsonc"
PROJECT_CONFIG_FILENAMES = [
    "bridge.jsonc",
    "bridge.json",
    ".serializable/bridge.jsonc",
]

# Environment variable overriding the configured log level
LOG_LEVEL_ENV = "LOG_LEVEL"
