"""
Recipe validator — structural lint of a recipe file.

Rules (every violation is collected, none short-circuits):

    name       identifier, optionally ``@version`` pinned
    version    valid semantic version
    homepage   absolute http(s) URL when set
    url        absolute http(s) URL for every package
    sha256     64 lowercase hex characters
    platform   no two packages with the same os/arch pair

When an UpdatePlan is given, the file must also reflect it: the new
version, the planned package count, and the new checksums in order.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from urllib.parse import urlparse

from recipebump.core.errors import LoadError, ValidationError
from recipebump.core.models.plan import UpdatePlan
from recipebump.core.models.recipe import Recipe
from recipebump.core.models.version import is_semver
from recipebump.core.services.recipe_parser import RecipeParser, YamlRecipeParser
from recipebump.core.services.recipe_store import read_text

logger = logging.getLogger(__name__)

_NAME_RE = re.compile(r"^[\w.-]+(@[\w.+-]+)?$")
_SHA256_RE = re.compile(r"^[0-9a-f]{64}$")


def _is_http_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def lint_recipe(recipe: Recipe) -> list[str]:
    """Return every lint violation of ``recipe`` (empty when clean)."""
    violations: list[str] = []

    if not _NAME_RE.match(recipe.name):
        violations.append(f"name {recipe.name!r} is not a valid recipe name")
    if not is_semver(recipe.version):
        violations.append(f"version {recipe.version!r} is not a semantic version")
    if recipe.homepage and not _is_http_url(recipe.homepage):
        violations.append(f"homepage {recipe.homepage!r} is not an http(s) URL")

    platforms: dict[tuple[str, str], int] = {}
    for index, package in enumerate(recipe.packages, start=1):
        if not _is_http_url(package.url):
            violations.append(f"package #{index}: url {package.url!r} is not an http(s) URL")
        if not _SHA256_RE.match(package.checksum):
            violations.append(
                f"package #{index}: sha256 {package.checksum!r} is not 64 lowercase hex characters"
            )
        if package.os and package.arch:
            key = (package.os, package.arch)
            if key in platforms:
                violations.append(
                    f"package #{index}: duplicate platform {package.platform}"
                    f" (also package #{platforms[key]})"
                )
            else:
                platforms[key] = index

    return violations


def _plan_violations(recipe: Recipe, plan: UpdatePlan) -> list[str]:
    violations: list[str] = []
    if recipe.version != plan.new_version:
        violations.append(f"version is {recipe.version!r}, expected {plan.new_version!r}")
    if len(recipe.packages) != len(plan.packages):
        violations.append(
            f"has {len(recipe.packages)} packages, expected {len(plan.packages)}"
        )
    for index, (package, update) in enumerate(zip(recipe.packages, plan.packages), start=1):
        if package.checksum != update.new_checksum:
            violations.append(f"package #{index}: sha256 was not updated")
    return violations


class RecipeValidator:
    """Re-parse a recipe and lint it."""

    def __init__(self, parser: RecipeParser | None = None) -> None:
        self._parser = parser or YamlRecipeParser()

    def validate_text(
        self, text: str, *, source: str = "<recipe>", plan: UpdatePlan | None = None
    ) -> Recipe:
        """Parse and lint ``text``.

        Raises:
            ValidationError: With every violation found, including a
                parse failure.
        """
        try:
            document = self._parser.parse(text, source=source)
        except LoadError as e:
            raise ValidationError([str(e)], source=source) from e

        violations = lint_recipe(document.recipe)
        if plan is not None:
            violations.extend(_plan_violations(document.recipe, plan))

        if violations:
            logger.debug("%s: %d violations", source, len(violations))
            raise ValidationError(violations, source=source)
        return document.recipe

    def validate_file(self, path: Path, plan: UpdatePlan | None = None) -> Recipe:
        """Validate the recipe stored at ``path``."""
        try:
            text = read_text(path)
        except (OSError, UnicodeDecodeError) as e:
            raise ValidationError([f"cannot read: {e}"], source=str(path)) from e
        return self.validate_text(text, source=str(path), plan=plan)
