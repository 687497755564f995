"""
Workspace — where the recipe files of a run live.

    --recipes-dir DIR   the directory itself; files are rewritten in place
    --rig URL           a shallow clone in a temp directory, removed when
                        the run ends however many recipes failed
"""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from recipebump.adapters.vcs.git import shallow_clone
from recipebump.core.errors import ConfigError, LoadError
from recipebump.core.models.settings import Settings

logger = logging.getLogger(__name__)


@contextmanager
def recipe_workspace(settings: Settings) -> Iterator[Path]:
    """Yield the recipe directory for ``settings``.

    Raises:
        ConfigError: If neither a rig nor a recipes directory is configured.
        CloneError: If the rig cannot be cloned.
        LoadError: If the clone has no recipe subdirectory.
    """
    if settings.recipes_dir is not None:
        yield settings.recipes_dir
        return

    if not settings.rig:
        raise ConfigError("No recipes configured: pass --rig or --recipes-dir")

    with tempfile.TemporaryDirectory(prefix="recipebump_") as tmp:
        checkout = shallow_clone(settings.rig, Path(tmp) / "rig", timeout=settings.timeout)
        recipes_dir = checkout / settings.subdir
        if not recipes_dir.is_dir():
            raise LoadError(f"rig has no {settings.subdir!r} directory", path=recipes_dir)
        yield recipes_dir
        logger.debug("Removing checkout %s", tmp)
