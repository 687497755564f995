"""
Domain models for recipebump.

All models are re-exported here for convenient access:

    from recipebump.core.models import Recipe, Package, SemVer, UpdatePlan, Settings
"""

from recipebump.core.models.plan import (
    PackageUpdate,
    ReleaseInfo,
    Resolution,
    SourceRef,
    UpdatePlan,
)
from recipebump.core.models.recipe import PIN_MARKER, Package, Recipe
from recipebump.core.models.settings import Settings, SourceOverride
from recipebump.core.models.version import SemVer, is_semver

__all__ = [
    # recipe.py
    "PIN_MARKER",
    "Package",
    # plan.py
    "PackageUpdate",
    "Recipe",
    "ReleaseInfo",
    "Resolution",
    # version.py
    "SemVer",
    # settings.py
    "Settings",
    "SourceOverride",
    "SourceRef",
    "UpdatePlan",
    "is_semver",
]
