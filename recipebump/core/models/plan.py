"""
Update plan models — ephemeral per-recipe state.

A plan lives only for the duration of one recipe's processing:

    VersionResolver  → Resolution (with an UpdatePlan when an update is due)
    ArtifactHasher   → UpdatePlan with one PackageUpdate per package
    RecipePatcher    → consumes the plan, never stores it
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ReleaseInfo:
    """Latest published release of an upstream source."""

    tag: str


@dataclass(frozen=True)
class SourceRef:
    """An upstream GitHub repository and where we learned about it."""

    owner: str
    repo: str
    origin: str = ""  # "override", "package-url" or "homepage"

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def url(self) -> str:
        return f"https://github.com/{self.owner}/{self.repo}"


@dataclass(frozen=True)
class PackageUpdate:
    """Old and new location/checksum of one package."""

    old_url: str
    new_url: str
    old_checksum: str
    new_checksum: str


@dataclass(frozen=True)
class UpdatePlan:
    """Everything needed to rewrite one recipe."""

    recipe_name: str
    old_version: str
    new_version: str
    source: SourceRef | None = None
    packages: tuple[PackageUpdate, ...] = field(default=())

    @property
    def is_hashed(self) -> bool:
        return bool(self.packages)

    def to_dict(self) -> dict:
        return {
            "recipe": self.recipe_name,
            "old_version": self.old_version,
            "new_version": self.new_version,
            "source": self.source.slug if self.source else None,
            "packages": [
                {
                    "old_url": p.old_url,
                    "new_url": p.new_url,
                    "old_checksum": p.old_checksum,
                    "new_checksum": p.new_checksum,
                }
                for p in self.packages
            ],
        }


@dataclass(frozen=True)
class Resolution:
    """Outcome of version resolution: an update plan, or the reason for none."""

    recipe_name: str
    plan: UpdatePlan | None = None
    reason: str = ""
    skipped: bool = False  # True when no lookup was attempted

    @property
    def needs_update(self) -> bool:
        return self.plan is not None
