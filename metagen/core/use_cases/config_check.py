"""
Config check use case — validate metagen.yml and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from metagen.core.config.loader import ConfigError, find_config_file, load_config
from metagen.core.models.plugin import AgentConfig


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    config: AgentConfig | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "plugin_count": len(self.config.metadata_plugins) if self.config else 0,
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate agent configuration and report issues.

    Args:
        config_path: Optional explicit path to metagen.yml.

    Returns:
        ConfigCheckResult with validation status and any issues.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_config_file()
    if config_path is None:
        result.errors.append("No metagen.yml found.")
        return result
    result.config_path = config_path

    try:
        config = load_config(config_path)
        result.config = config
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    if not config.metadata_plugins:
        result.warnings.append("No metadata plugins defined. Nothing will be fetched.")

    for name, plugin in sorted(config.metadata_plugins.items()):
        interval = plugin.execution_interval
        if interval is not None and interval < 1:
            result.warnings.append(
                f"Plugin '{name}' execution_interval {interval} is below "
                "the 1 minute floor and will run every minute."
            )

    result.valid = len(result.errors) == 0
    return result
