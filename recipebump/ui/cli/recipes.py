"""
CLI commands for inspecting a recipe directory.

Thin wrappers over ``recipebump.core.services.recipe_store`` and
``recipebump.core.use_cases.lint``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click


def _settings(ctx: click.Context, recipes_dir: Path | None, rig: str | None):
    from recipebump.core.config.loader import build_settings
    from recipebump.core.errors import ConfigError
    from recipebump.main import resolve_config_path

    try:
        return build_settings(
            config_path=resolve_config_path(ctx), rig=rig, recipes_dir=recipes_dir
        )
    except ConfigError as e:
        raise click.UsageError(str(e), ctx=ctx) from e


@click.group()
def recipes() -> None:
    """Recipes — list and lint without updating."""


@recipes.command("list")
@click.option("--rig", default=None, help="Git URL of the recipe repository to clone.")
@click.option(
    "--recipes-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Local recipe directory.",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_recipes(
    ctx: click.Context, rig: str | None, recipes_dir: Path | None, as_json: bool
) -> None:
    """List every recipe with its version and upstream source."""
    from recipebump.core.errors import ConfigError, RecipeBumpError
    from recipebump.core.services.recipe_store import load_recipes
    from recipebump.core.services.version_resolver import find_source
    from recipebump.core.services.workspace import recipe_workspace

    settings = _settings(ctx, recipes_dir, rig)
    rows = []
    try:
        with recipe_workspace(settings) as directory:
            for stored in load_recipes(directory):
                source = find_source(stored.recipe, settings)
                rows.append({
                    "name": stored.name,
                    "version": stored.recipe.version,
                    "packages": len(stored.recipe.packages),
                    "pinned": stored.recipe.is_pinned,
                    "source": source.slug if source else None,
                })
    except ConfigError as e:
        raise click.UsageError(str(e), ctx=ctx) from e
    except RecipeBumpError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps({"recipes": rows}, indent=2))
        return

    if not rows:
        click.secho("⚠️  No recipes found", fg="yellow")
        return

    click.secho(f"📦 Recipes ({len(rows)}):", fg="cyan", bold=True)
    for row in rows:
        pin = " 📌" if row["pinned"] else ""
        source = f"  ← {row['source']}" if row["source"] else ""
        click.echo(f"   • {row['name']} {row['version']}{pin}{source}")


@recipes.command("lint")
@click.option("--rig", default=None, help="Git URL of the recipe repository to clone.")
@click.option(
    "--recipes-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Local recipe directory.",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def lint(ctx: click.Context, rig: str | None, recipes_dir: Path | None, as_json: bool) -> None:
    """Run the lint rules over every recipe; exit 1 on any violation."""
    from recipebump.core.errors import ConfigError, RecipeBumpError
    from recipebump.core.services.workspace import recipe_workspace
    from recipebump.core.use_cases.lint import lint_recipes

    settings = _settings(ctx, recipes_dir, rig)
    try:
        with recipe_workspace(settings) as directory:
            result = lint_recipes(directory)
    except ConfigError as e:
        raise click.UsageError(str(e), ctx=ctx) from e
    except RecipeBumpError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if result.ok:
        click.secho(f"✅ {result.checked} recipes, no violations", fg="green", bold=True)
        return

    click.secho(
        f"❌ {len(result.violations)} of {result.checked} recipes have violations:",
        fg="red",
        bold=True,
    )
    for name, problems in result.violations.items():
        click.secho(f"   {name}", bold=True)
        for problem in problems:
            click.echo(f"     • {problem}")
    sys.exit(1)
