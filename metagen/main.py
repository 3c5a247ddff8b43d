"""
metagen — CLI entrypoint.

Usage:
    python -m metagen.main --help
    python -m metagen.main config check
    python -m metagen.main fetch hostinfo
    python -m metagen.main run
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from metagen import __version__
from metagen.core.observability.logging_config import resolve_level, setup_logging_from_env
from metagen.core.use_cases.fetch import FetchReport

_STATUS_STYLE = {
    "ok": ("✓", "green"),
    "changed": ("↻", "cyan"),
    "unchanged": ("=", "white"),
    "failed": ("✗", "red"),
}


@click.group()
@click.version_option(version=__version__, prog_name="metagen")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to metagen.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """metagen — collect host metadata from external commands."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging_from_env(resolve_level(debug=debug, verbose=verbose, quiet=quiet))


@cli.group()
def config() -> None:
    """Configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate metagen.yml configuration."""
    from metagen.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        assert result.config is not None  # guaranteed when valid
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        click.echo(f"   Plugins: {len(result.config.metadata_plugins)}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        sys.exit(1)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def plugins(ctx: click.Context, as_json: bool) -> None:
    """List metadata plugins and their effective intervals."""
    from metagen.core.config.loader import ConfigError, load_config
    from metagen.core.use_cases.fetch import build_generators

    try:
        generators = build_generators(load_config(ctx.obj.get("config_path")))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    rows = [
        {
            "name": g.name,
            "command": g.config.command,
            "interval_minutes": int(g.interval().total_seconds() // 60),
        }
        for g in generators
    ]

    if as_json:
        click.echo(json.dumps(rows, indent=2))
        return

    if not rows:
        click.echo("No metadata plugins configured.")
        return

    for row in rows:
        click.secho(f"• {row['name']}", bold=True, nl=False)
        click.echo(f"  every {row['interval_minutes']}m  → {row['command']}")


@cli.command()
@click.argument("names", nargs=-1)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def fetch(ctx: click.Context, names: tuple[str, ...], as_json: bool) -> None:
    """Run plugin commands once and print their metadata.

    Examples:

        metagen fetch

        metagen fetch hostinfo packages
    """
    from metagen.core.use_cases.fetch import fetch_metadata

    report = fetch_metadata(
        config_path=ctx.obj.get("config_path"),
        names=list(names) or None,
    )
    _emit_report(ctx, report, as_json, show_values=True)


@cli.command()
@click.argument("names", nargs=-1)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--no-save", is_flag=True, help="Compare only; don't update the cache.")
@click.option(
    "--state-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Override the metadata cache directory.",
)
@click.pass_context
def run(
    ctx: click.Context,
    names: tuple[str, ...],
    as_json: bool,
    no_save: bool,
    state_dir: str | None,
) -> None:
    """Fetch plugins and report which metadata changed since last run."""
    from metagen.core.use_cases.cycle import run_cycle

    report = run_cycle(
        config_path=ctx.obj.get("config_path"),
        names=list(names) or None,
        state_dir=Path(state_dir) if state_dir else None,
        save=not no_save,
    )
    _emit_report(ctx, report, as_json, show_values=ctx.obj.get("verbose", False))


def _emit_report(
    ctx: click.Context, report: FetchReport, as_json: bool, show_values: bool
) -> None:
    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
        if not report.all_ok:
            sys.exit(1)
        return

    if report.error:
        click.secho(f"❌ {report.error}", fg="red")
        sys.exit(1)

    for outcome in report.outcomes:
        icon, color = _STATUS_STYLE.get(outcome.status, ("?", "white"))
        click.secho(f"{icon} {outcome.name}", fg=color, nl=False)
        click.echo(f" ({outcome.status}, {outcome.duration_ms}ms)")
        if outcome.failed:
            click.echo(f"   │ {outcome.error_type}: {outcome.error}")
        elif show_values:
            rendered = json.dumps(outcome.value, indent=2, ensure_ascii=False)
            for line in rendered.split("\n"):
                click.echo(f"   │ {line}")

    if not ctx.obj.get("quiet") and len(report.outcomes) > 1:
        click.echo()
        click.echo(f"{len(report.outcomes) - report.failed}/{len(report.outcomes)} succeeded")

    if report.failed:
        sys.exit(1)


if __name__ == "__main__":
    cli()
