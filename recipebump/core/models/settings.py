"""
Settings model — the immutable run configuration.

Built once by ``core.config.loader.build_settings`` from the config file
and CLI flags, then handed to every stage of the pipeline.  Frozen: no
stage can change what another stage sees.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_SUBDIR = "recipes"


class SourceOverride(BaseModel):
    """Explicit ``recipe-name → owner/repo`` mapping."""

    model_config = ConfigDict(frozen=True)

    name: str
    owner: str
    repo: str

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"


class Settings(BaseModel):
    """Everything a run needs to know, fixed at startup."""

    model_config = ConfigDict(frozen=True)

    rig: str | None = None
    recipes_dir: Path | None = None
    subdir: str = DEFAULT_SUBDIR

    skip: frozenset[str] = Field(default_factory=frozenset)
    overrides: tuple[SourceOverride, ...] = ()

    github_token: str | None = Field(default=None, repr=False)
    api_url: str = DEFAULT_API_URL
    timeout: float | None = None

    dry_run: bool = False

    def override_for(self, name: str) -> SourceOverride | None:
        """Look up the source override for a recipe name."""
        for override in self.overrides:
            if override.name == name:
                return override
        return None

    def to_dict(self) -> dict:
        """Public view of the settings (the token is never included)."""
        return {
            "rig": self.rig,
            "recipes_dir": str(self.recipes_dir) if self.recipes_dir else None,
            "subdir": self.subdir,
            "skip": sorted(self.skip),
            "overrides": {o.name: o.slug for o in self.overrides},
            "api_url": self.api_url,
            "timeout": self.timeout,
            "authenticated": bool(self.github_token),
            "dry_run": self.dry_run,
        }
