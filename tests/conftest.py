"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from recipebump.core.services.artifact_hasher import ArtifactHasher
from tests.helpers import (
    FOO_NEW_DARWIN_URL,
    FOO_NEW_LINUX_URL,
    FOO_RECIPE,
    FakeOpener,
    write_recipe,
)


@pytest.fixture
def recipes_dir(tmp_path: Path) -> Path:
    """Return an empty recipe directory."""
    path = tmp_path / "recipes"
    path.mkdir()
    return path


@pytest.fixture
def foo_recipe(recipes_dir: Path) -> Path:
    """The two-package ``foo`` recipe at version 1.0.0."""
    return write_recipe(recipes_dir, "foo", FOO_RECIPE)


@pytest.fixture
def foo_opener() -> FakeOpener:
    """Artifacts of ``foo`` 1.2.0."""
    return FakeOpener({FOO_NEW_LINUX_URL: b"abc", FOO_NEW_DARWIN_URL: b"hello world"})


@pytest.fixture
def fake_hasher(foo_opener: FakeOpener) -> ArtifactHasher:
    return ArtifactHasher(opener=foo_opener)
