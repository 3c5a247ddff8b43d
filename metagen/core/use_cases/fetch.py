"""
Fetch use case — run metadata commands once and report what they print.

Nothing is compared or persisted here; see cycle.py for that.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from metagen.adapters.base import ProcessRunner
from metagen.core.config.loader import ConfigError, find_config_file, load_config
from metagen.core.models.plugin import AgentConfig
from metagen.core.services.metadata_generator import Generator, MetadataError

logger = logging.getLogger(__name__)


@dataclass
class PluginOutcome:
    """What happened to one plugin in a fetch or cycle."""

    name: str
    status: str = "ok"   # ok, changed, unchanged, failed
    value: Any = None
    error: str | None = None
    error_type: str | None = None
    duration_ms: int = 0

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    def to_dict(self) -> dict:
        d: dict = {"name": self.name, "status": self.status, "duration_ms": self.duration_ms}
        if self.failed:
            d["error"] = self.error
            d["error_type"] = self.error_type
        else:
            d["value"] = self.value
        return d


@dataclass
class FetchReport:
    """Result of fetching one or more plugins."""

    config_path: Path | None = None
    outcomes: list[PluginOutcome] = field(default_factory=list)
    error: str | None = None

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.failed)

    @property
    def all_ok(self) -> bool:
        return self.error is None and self.failed == 0

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {
            "config_path": str(self.config_path) if self.config_path else None,
            "plugins": [o.to_dict() for o in self.outcomes],
            "failed": self.failed,
        }


def build_generators(
    config: AgentConfig,
    names: list[str] | None = None,
    runner: ProcessRunner | None = None,
) -> list[Generator]:
    """Create generators for the selected plugins (all when names is empty).

    Raises:
        ConfigError: If a requested plugin name is not configured.
    """
    if names:
        unknown = [n for n in names if n not in config.metadata_plugins]
        if unknown:
            raise ConfigError(f"Unknown metadata plugins: {', '.join(unknown)}")
        selected = names
    else:
        selected = sorted(config.metadata_plugins)

    return [
        Generator(name, config.metadata_plugins[name], runner=runner)
        for name in selected
    ]


def run_fetch(generator: Generator) -> PluginOutcome:
    """Fetch once, turning a MetadataError into a failed outcome."""
    outcome = PluginOutcome(name=generator.name)
    start = time.monotonic()
    try:
        outcome.value = generator.fetch()
    except MetadataError as e:
        outcome.status = "failed"
        outcome.error = str(e)
        outcome.error_type = type(e).__name__
    outcome.duration_ms = int((time.monotonic() - start) * 1000)
    return outcome


def fetch_metadata(
    config_path: Path | None = None,
    names: list[str] | None = None,
    runner: ProcessRunner | None = None,
) -> FetchReport:
    """Fetch metadata from the configured plugins.

    Args:
        config_path: Optional explicit path to metagen.yml.
        names: Plugins to fetch. None or empty = all.
        runner: Optional runner override (default: a shell runner per plugin).

    Returns:
        FetchReport with one outcome per plugin.
    """
    report = FetchReport()

    try:
        if config_path is None:
            config_path = find_config_file()
        if config_path is None:
            report.error = "No metagen.yml found."
            return report
        report.config_path = config_path

        config = load_config(config_path)
        generators = build_generators(config, names, runner)
    except ConfigError as e:
        report.error = str(e)
        return report

    for generator in generators:
        report.outcomes.append(run_fetch(generator))

    logger.info("Fetched %d plugins, %d failed", len(report.outcomes), report.failed)
    return report
