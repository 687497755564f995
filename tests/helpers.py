"""
Test doubles and recipe builders shared by the test modules.

Nothing here touches the network: release lookups go through
``FakeReleases`` and artifact downloads through ``FakeOpener``.
"""

import io
import textwrap
import urllib.error
from pathlib import Path

from recipebump.core.errors import ReleaseLookupError
from recipebump.core.models.plan import ReleaseInfo

# Reference SHA-256 digests
SHA_EMPTY = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
SHA_ABC = "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
SHA_HELLO = "b94d27b9934d3e08a52e52d7da7dabfac484efe37a5380ee9088f7ace2efcde9"

OLD_SHA_A = "a" * 64
OLD_SHA_B = "b" * 64

FOO_RECIPE = textwrap.dedent("""\
    # foo: the example tool
    name: foo
    version: 1.0.0
    homepage: https://github.com/acme/foo
    description: "Foo does things"
    packages:
      - os: linux
        arch: amd64
        url: https://github.com/acme/foo/releases/download/v1.0.0/foo-1.0.0-linux-amd64.tar.gz
        sha256: aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa
      - os: darwin
        arch: arm64   # apple silicon
        url: https://github.com/acme/foo/releases/download/v1.0.0/foo-1.0.0-darwin-arm64.tar.gz
        sha256: bbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb
""")

FOO_NEW_LINUX_URL = (
    "https://github.com/acme/foo/releases/download/v1.2.0/foo-1.2.0-linux-amd64.tar.gz"
)
FOO_NEW_DARWIN_URL = (
    "https://github.com/acme/foo/releases/download/v1.2.0/foo-1.2.0-darwin-arm64.tar.gz"
)


class FakeReleases:
    """In-memory release source keyed by ``owner/repo``.

    A value that is an exception instance is raised instead of returned.
    """

    def __init__(self, tags=None):
        self.tags = dict(tags or {})
        self.calls: list[str] = []

    def latest_release(self, owner: str, repo: str) -> ReleaseInfo:
        slug = f"{owner}/{repo}"
        self.calls.append(slug)
        tag = self.tags.get(slug)
        if tag is None:
            raise ReleaseLookupError(f"github release {slug}: HTTP 404 (no published release)")
        if isinstance(tag, Exception):
            raise tag
        return ReleaseInfo(tag=tag)


class FakeOpener:
    """Stand-in for ``urllib.request.urlopen`` serving fixed bodies.

    ``responses`` maps URL to bytes, or to an ``(status, body)`` tuple for
    an HTTP error, or to an exception instance to raise.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls: list[str] = []

    def __call__(self, req, **kwargs):
        url = req.full_url if hasattr(req, "full_url") else req
        self.calls.append(url)
        response = self.responses.get(url)
        if response is None:
            raise urllib.error.HTTPError(url, 404, "Not Found", {}, io.BytesIO(b"not found"))
        if isinstance(response, Exception):
            raise response
        if isinstance(response, tuple):
            status, body = response
            raise urllib.error.HTTPError(url, status, "error", {}, io.BytesIO(body))
        return io.BytesIO(response)


def write_recipe(directory: Path, name: str, content: str, suffix: str = ".yaml") -> Path:
    """Write a recipe file and return its path."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{name}{suffix}"
    path.write_bytes(content.encode("utf-8"))
    return path


def simple_recipe(
    name: str,
    version: str = "1.0.0",
    owner: str = "acme",
    sha: str = OLD_SHA_A,
    homepage: str | None = None,
) -> str:
    """One-package recipe body whose URL embeds the version."""
    repo = name.split("@")[0]
    homepage = homepage if homepage is not None else f"https://github.com/{owner}/{repo}"
    return textwrap.dedent(f"""\
        name: {name}
        version: {version}
        homepage: {homepage}
        packages:
          - url: https://github.com/{owner}/{repo}/releases/download/v{version}/{repo}-{version}.tar.gz
            sha256: {sha}
    """)


