"""
Version resolver — does this recipe need an update, and to what?

Decision order for one recipe:

    1. skip set / pin marker         → no update, no network
    2. upstream source               → override, first package URL, homepage
    3. latest release tag            → one API call
    4. current version must be semver  (hard error otherwise)
    5. release tag should be semver    (soft skip otherwise)
    6. tag > current by precedence   → UpdatePlan
"""

from __future__ import annotations

import logging
import re

from recipebump.adapters.github.releases import ReleaseSource
from recipebump.core.errors import VersionParseError
from recipebump.core.models.plan import Resolution, SourceRef, UpdatePlan
from recipebump.core.models.recipe import Recipe
from recipebump.core.models.settings import Settings
from recipebump.core.models.version import SemVer

logger = logging.getLogger(__name__)

GITHUB_URL_RE = re.compile(r"^https://github\.com/(?P<owner>[\w.-]+)/(?P<repo>[\w.-]+)")


def parse_github_url(url: str) -> tuple[str, str] | None:
    """Extract ``(owner, repo)`` from a github.com URL."""
    match = GITHUB_URL_RE.match(url)
    if match is None:
        return None
    repo = match["repo"].removesuffix(".git")
    if not repo:
        return None
    return match["owner"], repo


def skip_reason(recipe: Recipe, settings: Settings) -> str | None:
    """Why this recipe must not be looked up at all, if it must not."""
    if recipe.name in settings.skip:
        return "skipping"
    if recipe.is_pinned:
        return "skipping pinned version"
    return None


def find_source(recipe: Recipe, settings: Settings) -> SourceRef | None:
    """Resolve the upstream repository of a recipe, in priority order."""
    override = settings.override_for(recipe.name)
    if override is not None:
        return SourceRef(owner=override.owner, repo=override.repo, origin="override")

    candidates = (
        ("package-url", recipe.packages[0].url),
        ("homepage", recipe.homepage),
    )
    for origin, url in candidates:
        parsed = parse_github_url(url) if url else None
        if parsed is not None:
            return SourceRef(owner=parsed[0], repo=parsed[1], origin=origin)
    return None


class VersionResolver:
    """Gate a recipe on its upstream's latest release."""

    def __init__(self, releases: ReleaseSource, settings: Settings) -> None:
        self._releases = releases
        self._settings = settings

    def resolve(self, recipe: Recipe) -> Resolution:
        """Decide whether ``recipe`` needs an update.

        Raises:
            ReleaseLookupError: If the release query fails.
            VersionParseError: If the recipe's own version is not semver.
        """
        reason = skip_reason(recipe, self._settings)
        if reason is not None:
            logger.warning("%s: %s", recipe.name, reason)
            return Resolution(recipe_name=recipe.name, reason=reason, skipped=True)

        source = find_source(recipe, self._settings)
        if source is None:
            logger.warning("%s: no available github release", recipe.name)
            return Resolution(
                recipe_name=recipe.name, reason="no available github release", skipped=True
            )

        logger.debug("%s: upstream %s (from %s)", recipe.name, source.slug, source.origin)
        release = self._releases.latest_release(source.owner, source.repo)

        current = SemVer.parse(recipe.version)

        try:
            latest = SemVer.parse(release.tag)
        except VersionParseError:
            logger.warning("%s: cannot parse semver for: %s", recipe.name, release.tag)
            return Resolution(
                recipe_name=recipe.name, reason=f"upstream tag {release.tag!r} is not semver"
            )

        if not latest > current:
            logger.debug("%s: up to date (%s, upstream %s)", recipe.name, current, latest)
            return Resolution(recipe_name=recipe.name, reason=f"up to date ({recipe.version})")

        plan = UpdatePlan(
            recipe_name=recipe.name,
            old_version=recipe.version,
            new_version=str(latest),
            source=source,
        )
        logger.info("updating: %s %s -> %s", recipe.name, recipe.version, plan.new_version)
        return Resolution(recipe_name=recipe.name, plan=plan)
