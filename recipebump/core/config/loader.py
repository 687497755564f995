"""
Configuration loader — reads recipebump.yml and CLI values into Settings.

Layering, lowest to highest precedence:

    recipebump.yml  →  CLI flags  →  environment (GITHUB_TOKEN, via click)

Skip and override lists are validated entry by entry.  A single bad entry
is a ConfigError and the run stops before any recipe is touched.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from recipebump.core.errors import ConfigError
from recipebump.core.models.settings import Settings, SourceOverride

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "recipebump.yml"

_SKIP_ENTRY_RE = re.compile(r"^[\w.-]+$")
_OVERRIDE_ENTRY_RE = re.compile(r"^(?P<name>[\w.-]+):(?P<owner>[\w.-]+)/(?P<repo>[\w.-]+)$")

_FILE_KEYS = {"rig", "recipes_dir", "subdir", "skip", "release", "api_url", "timeout"}


def _expect_str(value: Any, key: str) -> str | None:
    if value is None or isinstance(value, str):
        return value
    raise ConfigError(f"validate {key}: expected a string, got {type(value).__name__}")


def _split_entries(raw: str) -> list[str]:
    """Split a comma list, tolerating one trailing comma and padding."""
    raw = raw.strip()
    if not raw:
        return []
    if raw.endswith(","):
        raw = raw[:-1]
    return [entry.strip() for entry in raw.split(",")]


def parse_skip_list(raw: str | Iterable[str] | None) -> frozenset[str]:
    """Parse ``"a,b,c"`` (or a list of names) into a skip set.

    Raises:
        ConfigError: If any entry is not a plain recipe name.
    """
    if raw is None:
        return frozenset()
    if isinstance(raw, str):
        entries = _split_entries(raw)
    elif isinstance(raw, (list, tuple, set, frozenset)):
        entries = [str(e).strip() for e in raw]
    else:
        raise ConfigError(f"validate skip: expected a list of names, got {type(raw).__name__}")

    names: set[str] = set()
    for entry in entries:
        if not _SKIP_ENTRY_RE.match(entry):
            raise ConfigError(f"validate skip: did not match `name`: {entry!r}")
        names.add(entry)
    return frozenset(names)


def parse_release_overrides(
    raw: str | Iterable[str] | Mapping[str, str] | None,
) -> tuple[SourceOverride, ...]:
    """Parse ``"name:owner/repo,..."`` into source overrides.

    A mapping ``{name: "owner/repo"}`` (the YAML form) is accepted too.
    Later entries for the same name replace earlier ones.

    Raises:
        ConfigError: If any entry does not have the exact ``name:owner/repo`` shape.
    """
    if raw is None:
        return ()
    if isinstance(raw, Mapping):
        entries = [f"{name}:{slug}" for name, slug in raw.items()]
    elif isinstance(raw, str):
        entries = _split_entries(raw)
    elif isinstance(raw, (list, tuple)):
        entries = [str(e).strip() for e in raw]
    else:
        raise ConfigError(
            f"validate release: expected a list or mapping, got {type(raw).__name__}"
        )

    overrides: dict[str, SourceOverride] = {}
    for entry in entries:
        match = _OVERRIDE_ENTRY_RE.match(entry)
        if match is None:
            raise ConfigError(f"validate release: did not match `name:owner/repo`: {entry!r}")
        overrides[match["name"]] = SourceOverride(
            name=match["name"], owner=match["owner"], repo=match["repo"]
        )
    return tuple(overrides.values())


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for recipebump.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to recipebump.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config_file(path: Path) -> dict[str, Any]:
    """Read and shape-check a config file.

    Returns:
        The raw mapping of config keys (values not yet validated).

    Raises:
        ConfigError: If the file is unreadable, not YAML, not a mapping,
            or carries unknown keys.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    unknown = set(data) - _FILE_KEYS
    if unknown:
        raise ConfigError(f"Unknown keys in {path}: {', '.join(sorted(unknown))}")

    return data


def build_settings(
    *,
    config_path: Path | None = None,
    rig: str | None = None,
    recipes_dir: Path | None = None,
    subdir: str | None = None,
    skip: str | None = None,
    release: str | None = None,
    github_token: str | None = None,
    api_url: str | None = None,
    timeout: float | None = None,
    dry_run: bool = False,
) -> Settings:
    """Combine the config file with explicit values into frozen Settings.

    Explicit (CLI) values win over the file.  A relative ``recipes_dir``
    in the file is resolved against the file's directory.

    Raises:
        ConfigError: On any malformed value.
    """
    file_data: dict[str, Any] = load_config_file(config_path) if config_path else {}

    if rig is None:
        rig = _expect_str(file_data.get("rig"), "rig")
    if recipes_dir is None and file_data.get("recipes_dir"):
        recipes_dir = Path(_expect_str(file_data["recipes_dir"], "recipes_dir"))
        if config_path is not None and not recipes_dir.is_absolute():
            recipes_dir = config_path.parent / recipes_dir
    if subdir is None:
        subdir = _expect_str(file_data.get("subdir"), "subdir")
    if api_url is None:
        api_url = _expect_str(file_data.get("api_url"), "api_url")
    if timeout is None:
        timeout = file_data.get("timeout")

    if rig and recipes_dir:
        raise ConfigError("Specify either a rig to clone or a local recipes directory, not both.")

    skip_set = parse_skip_list(skip if skip is not None else file_data.get("skip"))
    overrides = parse_release_overrides(
        release if release is not None else file_data.get("release")
    )

    values: dict[str, Any] = {
        "rig": rig,
        "recipes_dir": recipes_dir,
        "skip": skip_set,
        "overrides": overrides,
        "github_token": github_token or None,
        "timeout": timeout,
        "dry_run": dry_run,
    }
    if subdir:
        values["subdir"] = subdir
    if api_url:
        values["api_url"] = api_url.rstrip("/")

    try:
        settings = Settings.model_validate(values)
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    logger.info(
        "Settings: %d skipped, %d overrides, %s",
        len(settings.skip),
        len(settings.overrides),
        f"rig {settings.rig}" if settings.rig else f"dir {settings.recipes_dir}",
    )
    return settings
