"""
Error taxonomy — every failure the update run can report.

Two classes of error exist:

    Fatal       ConfigError, LoadError, CloneError — raised before any
                recipe is processed and abort the whole run.
    Per-recipe  everything else — caught by the pipeline, logged with the
                recipe name, counted, and the run moves on.

The soft skip for a non-semver upstream tag is not an error at all; the
resolver logs a warning and reports "no update".
"""

from __future__ import annotations

from pathlib import Path


class RecipeBumpError(Exception):
    """Base class for all recipebump errors."""


class ConfigError(RecipeBumpError):
    """Raised when the skip list, override list or config file is malformed."""


class LoadError(RecipeBumpError):
    """Raised when a recipe file cannot be parsed into a Recipe."""

    def __init__(self, message: str, *, path: Path | str | None = None) -> None:
        self.path = Path(path) if path is not None else None
        if self.path is not None:
            message = f"{self.path}: {message}"
        super().__init__(message)


class CloneError(RecipeBumpError):
    """Raised when the recipe repository cannot be checked out."""


class VersionParseError(RecipeBumpError, ValueError):
    """Raised when a string is not a valid semantic version."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"invalid semantic version: {value!r}")


class ReleaseLookupError(RecipeBumpError):
    """Raised when the latest release of an upstream source cannot be fetched."""


class DownloadError(RecipeBumpError):
    """Raised when a new artifact cannot be downloaded and hashed.

    ``status`` is None for transport and mid-stream failures. ``body`` is
    only captured for server errors (5xx), where it usually explains the
    outage.
    """

    def __init__(
        self,
        url: str,
        *,
        status: int | None = None,
        body: str | None = None,
        reason: str = "",
    ) -> None:
        self.url = url
        self.status = status
        self.body = body
        self.reason = reason

        lines = [f"downloading package {url}"]
        if reason:
            lines.append(reason)
        if status is not None:
            lines.append(f"response code: {status}")
        if body is not None:
            lines.append(f"response body: {body}")
        super().__init__("\n".join(lines))


class PatchError(RecipeBumpError):
    """Raised when the stored recipe text no longer matches the update plan."""


class ValidationError(RecipeBumpError):
    """Raised when a patched recipe fails structural validation.

    All violations are collected before raising so one run shows
    everything that is wrong with the file.
    """

    def __init__(self, violations: list[str], *, source: str = "") -> None:
        self.violations = list(violations)
        self.source = source
        header = f"validation failed for {source}" if source else "validation failed"
        body = "\n".join(f" - {v}" for v in self.violations)
        super().__init__(f"{header}:\n{body}" if body else header)
