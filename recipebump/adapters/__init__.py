"""Adapters — bindings for the external systems a run talks to.

Public re-exports for convenient access.
"""

from recipebump.adapters.github.releases import GitHubReleaseClient, ReleaseSource
from recipebump.adapters.vcs.git import run_git, shallow_clone

__all__ = [
    "GitHubReleaseClient",
    "ReleaseSource",
    "run_git",
    "shallow_clone",
]
