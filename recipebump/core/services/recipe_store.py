"""
Recipe store — batch loading of a recipe directory.

The whole directory is loaded eagerly before any recipe is processed.  A
single unparsable file is a LoadError for the whole run: a half-loaded
recipe set would make the failure count meaningless.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from recipebump.core.errors import LoadError
from recipebump.core.models.recipe import Recipe
from recipebump.core.services.recipe_parser import RecipeDocument, RecipeParser, YamlRecipeParser

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredRecipe:
    """A recipe and the file it was loaded from."""

    path: Path
    recipe: Recipe

    @property
    def name(self) -> str:
        return self.recipe.name


def read_text(path: Path) -> str:
    """Read a recipe file without newline translation."""
    return path.read_bytes().decode("utf-8")


def recipe_path(recipes_dir: Path, name: str, parser: RecipeParser | None = None) -> Path:
    """Where the recipe called ``name`` lives (first existing suffix wins)."""
    parser = parser or YamlRecipeParser()
    for suffix in parser.suffixes:
        candidate = recipes_dir / f"{name}{suffix}"
        if candidate.is_file():
            return candidate
    return recipes_dir / f"{name}{parser.suffixes[0]}"


def parse_file(path: Path, parser: RecipeParser | None = None) -> RecipeDocument:
    """Read and parse one recipe file.

    Raises:
        LoadError: If the file is unreadable or not a valid recipe.
    """
    parser = parser or YamlRecipeParser()
    try:
        text = read_text(path)
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(f"cannot read recipe: {e}", path=path) from e
    return parser.parse(text, source=str(path))


def load_recipes(recipes_dir: Path, parser: RecipeParser | None = None) -> list[StoredRecipe]:
    """Load every recipe in ``recipes_dir``, ordered by file name.

    Hidden files and files without a recipe suffix are ignored.

    Raises:
        LoadError: If the directory is missing, a file does not parse,
            a file name does not match its recipe name, or two files
            declare the same recipe.
    """
    parser = parser or YamlRecipeParser()
    if not recipes_dir.is_dir():
        raise LoadError("recipe directory not found", path=recipes_dir)

    stored: list[StoredRecipe] = []
    seen: dict[str, Path] = {}
    for path in sorted(recipes_dir.iterdir(), key=lambda p: p.name):
        if path.name.startswith(".") or not path.is_file():
            continue
        if path.suffix not in parser.suffixes:
            logger.debug("Ignoring non-recipe file %s", path.name)
            continue

        recipe = parse_file(path, parser).recipe
        if path.stem != recipe.name:
            raise LoadError(
                f"file name does not match recipe name {recipe.name!r}", path=path
            )
        if recipe.name in seen:
            raise LoadError(
                f"recipe {recipe.name!r} also defined in {seen[recipe.name]}", path=path
            )
        seen[recipe.name] = path
        stored.append(StoredRecipe(path=path, recipe=recipe))

    logger.info("Loaded %d recipes from %s", len(stored), recipes_dir)
    return stored
