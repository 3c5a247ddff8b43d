"""
Cycle use case — one scheduling round: fetch, compare, commit.

For each plugin the cached baseline is restored, the command is run,
and the value is committed (in memory and on disk) only when it differs
from the baseline. A failed fetch leaves the baseline untouched.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

from metagen.adapters.base import ProcessRunner
from metagen.core.config.loader import (
    ConfigError,
    find_config_file,
    load_config,
    resolve_state_dir,
)
from metagen.core.persistence.metadata_cache import cache_path, load_cache, save_cache
from metagen.core.services.metadata_generator import Generator
from metagen.core.use_cases.fetch import FetchReport, PluginOutcome, build_generators, run_fetch

logger = logging.getLogger(__name__)


def run_plugin_cycle(generator: Generator, cache_file: Path | None = None) -> PluginOutcome:
    """Fetch one plugin and commit the value if it changed.

    Args:
        generator: The plugin's generator (baseline already restored).
        cache_file: Where to persist a changed value. None = memory only.
    """
    outcome = run_fetch(generator)
    if outcome.failed:
        return outcome

    if not generator.differs(outcome.value):
        outcome.status = "unchanged"
        logger.debug("[%s] metadata unchanged", generator.name)
        return outcome

    start = time.monotonic()
    try:
        if cache_file is not None:
            save_cache(cache_file, outcome.value)
    except OSError as e:
        logger.error("[%s] cannot write metadata cache: %s", generator.name, e)
        outcome.status = "failed"
        outcome.error = f"Cannot write metadata cache {cache_file}: {e}"
        outcome.error_type = type(e).__name__
        return outcome

    generator.save(outcome.value)
    outcome.status = "changed"
    outcome.duration_ms += int((time.monotonic() - start) * 1000)
    logger.info("[%s] metadata changed", generator.name)
    return outcome


def run_cycle(
    config_path: Path | None = None,
    names: list[str] | None = None,
    state_dir: Path | None = None,
    save: bool = True,
    runner: ProcessRunner | None = None,
) -> FetchReport:
    """Run one fetch-compare-commit round over the configured plugins.

    Args:
        config_path: Optional explicit path to metagen.yml.
        names: Plugins to run. None or empty = all.
        state_dir: Override for the cache directory in the config.
        save: If False, compare against the cache but never write it.
        runner: Optional runner override.

    Returns:
        FetchReport whose outcomes are changed / unchanged / failed.
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

    if state_dir is None:
        state_dir = resolve_state_dir(config, config_path)

    for generator in generators:
        cached = cache_path(state_dir, generator.name)
        found, value = load_cache(cached)
        if found:
            generator.restore(value)

        report.outcomes.append(run_plugin_cycle(generator, cached if save else None))

    logger.info(
        "Cycle done: %d plugins, %d changed, %d failed",
        len(report.outcomes),
        sum(1 for o in report.outcomes if o.status == "changed"),
        report.failed,
    )
    return report
