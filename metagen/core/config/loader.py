"""
Configuration loader — reads metagen.yml into domain models.

It reads YAML, validates against Pydantic schemas, and returns a
typed AgentConfig.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from metagen.core.models.plugin import AgentConfig

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "metagen.yml"


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for metagen.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to metagen.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config(path: Path | None = None) -> AgentConfig:
    """Load and validate agent configuration.

    Args:
        path: Explicit path to metagen.yml. If None, searches upward.

    Returns:
        Validated AgentConfig model.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if path is None:
        path = find_config_file()

    if path is None:
        raise ConfigError(f"No {CONFIG_FILE} found. Specify one with --config.")

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    # An empty file is a valid (if useless) config
    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        config = AgentConfig.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    logger.info("Loaded %d metadata plugins from %s", len(config.metadata_plugins), path)
    return config


def resolve_state_dir(config: AgentConfig, config_path: Path) -> Path:
    """Resolve the cache directory; relative paths hang off the config dir."""
    state_dir = Path(config.state_dir).expanduser()
    if not state_dir.is_absolute():
        state_dir = config_path.parent.resolve() / state_dir
    return state_dir
