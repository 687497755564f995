"""
Artifact hasher — download each new package and compute its SHA-256.

New URLs are derived by literal substitution of the old version string.
That only works when the old version does not occur elsewhere in the URL
(e.g. ``tool-1.0-linux/tool_1.0.tar.gz`` is fine, a host name containing
``1.0`` is not).
"""

from __future__ import annotations

import hashlib
import http.client
import logging
import urllib.error
import urllib.request
from collections.abc import Callable, Sequence
from dataclasses import replace
from typing import Any

from recipebump import __version__
from recipebump.core.errors import DownloadError
from recipebump.core.models.plan import PackageUpdate, UpdatePlan
from recipebump.core.models.recipe import Package

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
_MAX_BODY = 4096

Opener = Callable[..., Any]


def substitute_version(url: str, old_version: str, new_version: str) -> str:
    """Replace every literal occurrence of ``old_version`` in ``url``."""
    return url.replace(old_version, new_version)


def _error_body(error: urllib.error.HTTPError) -> str:
    try:
        raw = error.read(_MAX_BODY)
    except (OSError, http.client.HTTPException):
        return ""
    return raw.decode("utf-8", errors="replace").strip()


class ArtifactHasher:
    """Stream artifacts through SHA-256.

    ``opener`` defaults to ``urllib.request.urlopen``; tests pass a fake.
    """

    def __init__(self, timeout: float | None = None, opener: Opener | None = None) -> None:
        self._timeout = timeout
        self._opener = opener or urllib.request.urlopen

    def checksum(self, url: str) -> str:
        """Download ``url`` and return its lowercase hex SHA-256.

        Raises:
            DownloadError: On transport failure, an HTTP error status,
                or a failure while reading the body.
        """
        logger.debug("Hashing %s", url)
        req = urllib.request.Request(url, headers={"User-Agent": f"recipebump/{__version__}"})
        kwargs = {"timeout": self._timeout} if self._timeout is not None else {}

        try:
            resp = self._opener(req, **kwargs)
        except urllib.error.HTTPError as e:
            body = _error_body(e) if e.code >= 500 else None
            e.close()
            raise DownloadError(url, status=e.code, body=body) from e
        except (urllib.error.URLError, OSError, http.client.HTTPException, ValueError) as e:
            raise DownloadError(url, reason=str(e)) from e

        digest = hashlib.sha256()
        size = 0
        try:
            with resp:
                for chunk in iter(lambda: resp.read(CHUNK_SIZE), b""):
                    digest.update(chunk)
                    size += len(chunk)
        except (OSError, http.client.HTTPException) as e:
            raise DownloadError(url, reason=f"reading response: {e}") from e

        checksum = digest.hexdigest()
        logger.debug("%s: %d bytes, sha256 %s", url, size, checksum)
        return checksum

    def hash_plan(self, plan: UpdatePlan, packages: Sequence[Package]) -> UpdatePlan:
        """Return ``plan`` with one PackageUpdate per package, in order."""
        updates = []
        for package in packages:
            new_url = substitute_version(package.url, plan.old_version, plan.new_version)
            updates.append(
                PackageUpdate(
                    old_url=package.url,
                    new_url=new_url,
                    old_checksum=package.checksum,
                    new_checksum=self.checksum(new_url),
                )
            )
        return replace(plan, packages=tuple(updates))
