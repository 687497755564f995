"""
Git adapter — check out a recipe repository with the git CLI.

Only a shallow clone is needed: the run edits the working tree and never
commits, so history is irrelevant.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from recipebump.core.errors import CloneError

logger = logging.getLogger(__name__)


def run_git(
    *args: str,
    cwd: Path | None = None,
    timeout: float | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run a git command and return the result."""
    return subprocess.run(
        ["git", *args],
        cwd=str(cwd) if cwd else None,
        capture_output=True,
        text=True,
        timeout=timeout,
    )


def shallow_clone(url: str, dest: Path, *, timeout: float | None = None) -> Path:
    """Clone ``url`` into ``dest`` with ``--depth 1``.

    Raises:
        CloneError: If git is not installed, times out, or exits non-zero.
    """
    logger.info("Cloning %s", url)
    try:
        r = run_git("clone", "--depth", "1", "--quiet", url, str(dest), timeout=timeout)
    except FileNotFoundError as e:
        raise CloneError("git is not installed or not on PATH") from e
    except subprocess.TimeoutExpired as e:
        raise CloneError(f"git clone {url} timed out after {timeout}s") from e

    if r.returncode != 0:
        detail = r.stderr.strip() or r.stdout.strip() or f"exit code {r.returncode}"
        raise CloneError(f"git clone {url} failed: {detail}")

    logger.debug("Cloned %s into %s", url, dest)
    return dest
