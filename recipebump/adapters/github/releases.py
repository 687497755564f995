"""
GitHub release source — latest-release lookup over the REST API.

One client is built at startup and shared read-only by every recipe.
Talks to the API with urllib; no retries, and no timeout unless one is
configured.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from typing import Protocol

from recipebump import __version__
from recipebump.core.errors import ReleaseLookupError
from recipebump.core.models.plan import ReleaseInfo
from recipebump.core.models.settings import DEFAULT_API_URL, Settings

logger = logging.getLogger(__name__)


class ReleaseSource(Protocol):
    """Where the latest release tag of an upstream repository comes from."""

    def latest_release(self, owner: str, repo: str) -> ReleaseInfo:
        """Return the most recently published release, or raise ReleaseLookupError."""
        ...


class GitHubReleaseClient:
    """Minimal GitHub REST client for ``/repos/{owner}/{repo}/releases/latest``."""

    def __init__(
        self,
        token: str | None = None,
        *,
        api_url: str = DEFAULT_API_URL,
        timeout: float | None = None,
    ) -> None:
        self._token = token or None
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> GitHubReleaseClient:
        return cls(settings.github_token, api_url=settings.api_url, timeout=settings.timeout)

    @property
    def authenticated(self) -> bool:
        return self._token is not None

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": f"recipebump/{__version__}",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def latest_release(self, owner: str, repo: str) -> ReleaseInfo:
        api_url = f"{self._api_url}/repos/{owner}/{repo}/releases/latest"
        logger.debug("GET %s", api_url)

        req = urllib.request.Request(api_url, headers=self._headers())
        kwargs = {"timeout": self._timeout} if self._timeout is not None else {}
        try:
            with urllib.request.urlopen(req, **kwargs) as resp:  # noqa: S310 - fixed https API base
                payload = resp.read()
        except urllib.error.HTTPError as e:
            hint = ""
            if e.code == 404:
                hint = " (no published release)"
            elif e.code in (403, 429):
                hint = " (rate limited; set GITHUB_TOKEN)"
            raise ReleaseLookupError(
                f"github release {owner}/{repo}: HTTP {e.code}{hint}"
            ) from e
        except (urllib.error.URLError, OSError) as e:
            raise ReleaseLookupError(f"github release {owner}/{repo}: {e}") from e

        try:
            data = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ReleaseLookupError(f"github release {owner}/{repo}: invalid JSON: {e}") from e

        tag = data.get("tag_name") if isinstance(data, dict) else None
        if not isinstance(tag, str) or not tag:
            raise ReleaseLookupError(f"github release {owner}/{repo}: response has no tag_name")

        return ReleaseInfo(tag=tag)
