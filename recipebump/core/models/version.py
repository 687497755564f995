"""
Semantic version value type.

Parsing is deliberately lenient in the same places release tags usually
are: a leading ``v`` is accepted and missing minor/patch components default
to zero (``v1.2`` → ``1.2.0``).  Anything else that is not a semver string
(``latest``, ``nightly-2021-10-01``) is rejected with VersionParseError.

Ordering follows semver.org precedence: major, minor, patch, then
pre-release identifiers.  Build metadata is kept for display but never
takes part in comparison or equality.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import total_ordering

from recipebump.core.errors import VersionParseError

_IDENT = r"[0-9A-Za-z-]+"

_SEMVER_RE = re.compile(
    r"^v?(?P<major>0|[1-9]\d*)"
    r"(?:\.(?P<minor>0|[1-9]\d*))?"
    r"(?:\.(?P<patch>0|[1-9]\d*))?"
    rf"(?:-(?P<prerelease>{_IDENT}(?:\.{_IDENT})*))?"
    rf"(?:\+(?P<build>{_IDENT}(?:\.{_IDENT})*))?$"
)


def _prerelease_key(identifiers: tuple[str, ...]) -> tuple:
    # A release sorts after every pre-release of the same core version.
    if not identifiers:
        return (1,)
    parts = []
    for ident in identifiers:
        if ident.isdigit():
            parts.append((0, int(ident), ""))
        else:
            parts.append((1, 0, ident))
    return (0, tuple(parts))


@total_ordering
@dataclass(frozen=True, eq=False)
class SemVer:
    """An immutable, comparable semantic version."""

    major: int
    minor: int = 0
    patch: int = 0
    prerelease: tuple[str, ...] = field(default=())
    build: tuple[str, ...] = field(default=())

    @classmethod
    def parse(cls, text: str) -> SemVer:
        """Parse ``text`` or raise VersionParseError."""
        if not isinstance(text, str):
            raise VersionParseError(str(text))
        match = _SEMVER_RE.match(text.strip())
        if match is None:
            raise VersionParseError(text)

        prerelease = match.group("prerelease")
        if prerelease:
            # Numeric pre-release identifiers must not carry leading zeros.
            for ident in prerelease.split("."):
                if ident.isdigit() and len(ident) > 1 and ident.startswith("0"):
                    raise VersionParseError(text)

        build = match.group("build")
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor") or 0),
            patch=int(match.group("patch") or 0),
            prerelease=tuple(prerelease.split(".")) if prerelease else (),
            build=tuple(build.split(".")) if build else (),
        )

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    def precedence_key(self) -> tuple:
        return (self.major, self.minor, self.patch, _prerelease_key(self.prerelease))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return self.precedence_key() == other.precedence_key()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return self.precedence_key() < other.precedence_key()

    def __hash__(self) -> int:
        return hash(self.precedence_key())

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        if self.build:
            text += "+" + ".".join(self.build)
        return text


def is_semver(text: str) -> bool:
    """Whether ``text`` parses as a semantic version."""
    try:
        SemVer.parse(text)
    except VersionParseError:
        return False
    return True
