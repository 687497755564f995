"""
Recipe model — the structured view of one recipe file.

This is what the recipe parser produces and what the resolver and
validator read.  It is never written back to disk: the raw text is the
durable artifact and the patcher edits it directly.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

PIN_MARKER = "@"


class Package(BaseModel):
    """One downloadable artifact of a recipe."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    url: str = Field(min_length=1)
    checksum: str = Field(alias="sha256", min_length=1)
    os: str = ""
    arch: str = ""

    @property
    def platform(self) -> str:
        """``os/arch`` label, or empty when the package is platform-neutral."""
        if self.os or self.arch:
            return f"{self.os or '*'}/{self.arch or '*'}"
        return ""


class Recipe(BaseModel):
    """A package definition: name, version, homepage and its packages."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(min_length=1)
    version: str = Field(min_length=1)
    homepage: str = ""
    description: str = ""
    license: str = ""
    packages: list[Package] = Field(min_length=1)

    @property
    def is_pinned(self) -> bool:
        """Pinned recipes (``name@version``) are locked and never updated."""
        return PIN_MARKER in self.name
