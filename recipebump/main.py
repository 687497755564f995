"""
recipebump — CLI entrypoint.

Usage:
    python -m recipebump.main --help
    python -m recipebump.main update --rig https://github.com/org/recipes
    python -m recipebump.main config check
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from recipebump import __version__
from recipebump.core.observability.logging_config import (
    LOG_FILE_ENV,
    LOG_FILE_LEVEL_ENV,
    resolve_level,
    setup_logging,
)

_STATUS_STYLE = {
    "updated": ("⬆️ ", "green"),
    "would_update": ("⬆️ ", "cyan"),
    "up_to_date": ("✅", None),
    "skipped": ("⏭️ ", "yellow"),
    "failed": ("❌", "red"),
}


def resolve_config_path(ctx: click.Context) -> Path | None:
    """Explicit --config, else recipebump.yml found from the cwd upwards."""
    config_path: Path | None = ctx.obj.get("config_path")
    if config_path is None:
        from recipebump.core.config.loader import find_config_file

        config_path = find_config_file()
    return config_path


@click.group()
@click.version_option(version=__version__, prog_name="recipebump")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to recipebump.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """recipebump — bump package recipes to their latest upstream release."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(LOG_FILE_ENV),
        log_file_level=os.environ.get(LOG_FILE_LEVEL_ENV),
    )


@cli.command()
@click.option("--rig", default=None, help="Git URL of the recipe repository to clone.")
@click.option(
    "--recipes-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Local recipe directory to update in place (instead of --rig).",
)
@click.option("--subdir", default=None, help="Recipe directory inside the rig (default: recipes).")
@click.option("--skip", default=None, help="Comma-separated recipe names to skip.")
@click.option("--release", default=None, help="Comma-separated name:owner/repo source overrides.")
@click.option(
    "--token", envvar="GITHUB_TOKEN", default=None, help="GitHub token (env: GITHUB_TOKEN)."
)
@click.option("--api-url", default=None, help="GitHub API base URL.")
@click.option("--timeout", type=float, default=None, help="Per-request timeout in seconds.")
@click.option("--dry-run", is_flag=True, help="Resolve and hash, but write nothing.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def update(
    ctx: click.Context,
    rig: str | None,
    recipes_dir: Path | None,
    subdir: str | None,
    skip: str | None,
    release: str | None,
    token: str | None,
    api_url: str | None,
    timeout: float | None,
    dry_run: bool,
    as_json: bool,
) -> None:
    """Update every outdated recipe; exit code is the number of failures."""
    from recipebump.core.config.loader import build_settings
    from recipebump.core.errors import CloneError, ConfigError, LoadError
    from recipebump.core.use_cases.update import run_update

    try:
        settings = build_settings(
            config_path=resolve_config_path(ctx),
            rig=rig,
            recipes_dir=recipes_dir,
            subdir=subdir,
            skip=skip,
            release=release,
            github_token=token,
            api_url=api_url,
            timeout=timeout,
            dry_run=dry_run,
        )
        report = run_update(settings)
    except ConfigError as e:
        raise click.UsageError(str(e), ctx=ctx) from e
    except (LoadError, CloneError) as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        sys.exit(report.exit_code)

    quiet = ctx.obj.get("quiet", False)
    for outcome in report.outcomes:
        if quiet and outcome.status not in ("updated", "would_update", "failed"):
            continue
        icon, color = _STATUS_STYLE.get(outcome.status, ("•", None))
        line = f"{icon} {outcome.name}"
        if outcome.new_version:
            line += f"  {outcome.old_version} → {outcome.new_version}"
        elif outcome.message:
            line += f"  ({outcome.message.splitlines()[0]})"
        click.secho(line, fg=color)

    if not quiet:
        verb = "would update" if report.dry_run else "updated"
        click.echo()
        click.secho(
            f"{len(report.outcomes)} recipes: {report.updated} {verb}, {report.failed} failed",
            fg="red" if report.failed else "green",
            bold=True,
        )

    sys.exit(report.exit_code)


@cli.group()
def config() -> None:
    """Configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate recipebump.yml configuration."""
    from recipebump.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        assert result.settings is not None  # guaranteed when valid
        settings = result.settings
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        if result.config_path:
            click.echo(f"   File: {result.config_path}")
        source = settings.rig or (str(settings.recipes_dir) if settings.recipes_dir else "-")
        click.echo(f"   Recipes: {source}")
        click.echo(f"   Skip: {', '.join(sorted(settings.skip)) or '-'}")
        click.echo(f"   Overrides: {len(settings.overrides)}")
        for override in settings.overrides:
            click.echo(f"     • {override.name} → {override.slug}")
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
        click.echo()
        sys.exit(1)


# ── Register sub-groups ─────────────────────────────────────────

from recipebump.ui.cli.recipes import recipes  # noqa: E402

cli.add_command(recipes)


if __name__ == "__main__":
    cli()
