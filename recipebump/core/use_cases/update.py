"""
Update use case — bump every outdated recipe in a recipe directory.

Per recipe, strictly one after another:

    resolve  → hash  → stage patch  → validate staged file  → commit

Any error on one recipe is logged with the recipe name, counted, and the
run continues with the next recipe.  A recipe whose staged patch fails
validation is left exactly as it was on disk.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from recipebump.adapters.github.releases import GitHubReleaseClient, ReleaseSource
from recipebump.core.errors import RecipeBumpError
from recipebump.core.models.settings import Settings
from recipebump.core.services.artifact_hasher import ArtifactHasher
from recipebump.core.services.recipe_parser import RecipeParser, YamlRecipeParser
from recipebump.core.services.recipe_patcher import RecipePatcher
from recipebump.core.services.recipe_store import StoredRecipe, load_recipes
from recipebump.core.services.recipe_validator import RecipeValidator
from recipebump.core.services.version_resolver import VersionResolver
from recipebump.core.services.workspace import recipe_workspace

logger = logging.getLogger(__name__)

MAX_EXIT_CODE = 255

UPDATED = "updated"
WOULD_UPDATE = "would_update"
UP_TO_DATE = "up_to_date"
SKIPPED = "skipped"
FAILED = "failed"


@dataclass
class RecipeOutcome:
    """What happened to one recipe."""

    name: str
    status: str
    old_version: str = ""
    new_version: str = ""
    message: str = ""

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "status": self.status,
            "old_version": self.old_version,
            "new_version": self.new_version or None,
            "message": self.message,
        }


@dataclass
class UpdateReport:
    """Result of a full run."""

    outcomes: list[RecipeOutcome] = field(default_factory=list)
    dry_run: bool = False

    def _count(self, status: str) -> int:
        return sum(1 for o in self.outcomes if o.status == status)

    @property
    def failed(self) -> int:
        return self._count(FAILED)

    @property
    def updated(self) -> int:
        return self._count(WOULD_UPDATE if self.dry_run else UPDATED)

    @property
    def exit_code(self) -> int:
        return min(self.failed, MAX_EXIT_CODE)

    def to_dict(self) -> dict:
        return {
            "dry_run": self.dry_run,
            "total": len(self.outcomes),
            "updated": self.updated,
            "failed": self.failed,
            "recipes": [o.to_dict() for o in self.outcomes],
        }


class UpdatePipeline:
    """Run resolve/hash/patch/validate over recipes, isolating failures."""

    def __init__(
        self,
        settings: Settings,
        releases: ReleaseSource,
        *,
        parser: RecipeParser | None = None,
        hasher: ArtifactHasher | None = None,
        patcher: RecipePatcher | None = None,
        validator: RecipeValidator | None = None,
    ) -> None:
        parser = parser or YamlRecipeParser()
        self._settings = settings
        self._resolver = VersionResolver(releases, settings)
        self._hasher = hasher or ArtifactHasher(timeout=settings.timeout)
        self._patcher = patcher or RecipePatcher(parser)
        self._validator = validator or RecipeValidator(parser)

    def process(self, stored: StoredRecipe) -> RecipeOutcome:
        """Process a single recipe; errors propagate to the caller."""
        recipe = stored.recipe
        resolution = self._resolver.resolve(recipe)
        if resolution.plan is None:
            return RecipeOutcome(
                name=recipe.name,
                status=SKIPPED if resolution.skipped else UP_TO_DATE,
                old_version=recipe.version,
                message=resolution.reason,
            )

        plan = self._hasher.hash_plan(resolution.plan, recipe.packages)

        if self._settings.dry_run:
            patched = self._patcher.render(stored.path, plan)
            self._validator.validate_text(patched, source=str(stored.path), plan=plan)
            status = WOULD_UPDATE
        else:
            with self._patcher.stage(stored.path, plan) as staged:
                self._validator.validate_file(staged.path, plan)
                staged.commit()
            status = UPDATED

        return RecipeOutcome(
            name=recipe.name,
            status=status,
            old_version=plan.old_version,
            new_version=plan.new_version,
        )

    def run(self, recipes: Iterable[StoredRecipe]) -> UpdateReport:
        """Process recipes in order; never stops on a per-recipe failure."""
        report = UpdateReport(dry_run=self._settings.dry_run)
        for stored in recipes:
            try:
                outcome = self.process(stored)
            except RecipeBumpError as e:
                logger.error("%s: %s", stored.name, e)
                outcome = RecipeOutcome(
                    name=stored.name, status=FAILED,
                    old_version=stored.recipe.version, message=str(e),
                )
            except Exception as e:
                logger.exception("%s: unexpected error", stored.name)
                outcome = RecipeOutcome(
                    name=stored.name, status=FAILED,
                    old_version=stored.recipe.version, message=f"{type(e).__name__}: {e}",
                )
            report.outcomes.append(outcome)

        logger.info(
            "Processed %d recipes: %d updated, %d failed",
            len(report.outcomes), report.updated, report.failed,
        )
        return report


def run_update(
    settings: Settings,
    releases: ReleaseSource | None = None,
    *,
    parser: RecipeParser | None = None,
    hasher: ArtifactHasher | None = None,
) -> UpdateReport:
    """Acquire the recipes, load them all, and run the pipeline.

    Raises:
        ConfigError: If no recipe source is configured.
        CloneError: If the rig cannot be cloned.
        LoadError: If any recipe file fails to load.
    """
    parser = parser or YamlRecipeParser()
    releases = releases or GitHubReleaseClient.from_settings(settings)

    with recipe_workspace(settings) as recipes_dir:
        recipes = load_recipes(recipes_dir, parser)
        pipeline = UpdatePipeline(settings, releases, parser=parser, hasher=hasher)
        return pipeline.run(recipes)
