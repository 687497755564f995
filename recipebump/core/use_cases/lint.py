"""
Lint use case — check every recipe in a directory without updating.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from recipebump.core.services.recipe_parser import RecipeParser, YamlRecipeParser
from recipebump.core.services.recipe_store import load_recipes
from recipebump.core.services.recipe_validator import lint_recipe


@dataclass
class LintResult:
    """Violations per recipe name (only recipes with violations appear)."""

    recipes_dir: Path | None = None
    checked: int = 0
    violations: dict[str, list[str]] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.violations

    def to_dict(self) -> dict:
        return {
            "recipes_dir": str(self.recipes_dir) if self.recipes_dir else None,
            "checked": self.checked,
            "ok": self.ok,
            "violations": self.violations,
        }


def lint_recipes(recipes_dir: Path, parser: RecipeParser | None = None) -> LintResult:
    """Load every recipe in ``recipes_dir`` and run the lint rules.

    Raises:
        LoadError: If the directory or any recipe file fails to load.
    """
    recipes = load_recipes(recipes_dir, parser or YamlRecipeParser())
    result = LintResult(recipes_dir=recipes_dir, checked=len(recipes))
    for stored in recipes:
        problems = lint_recipe(stored.recipe)
        if problems:
            result.violations[stored.name] = problems
    return result
