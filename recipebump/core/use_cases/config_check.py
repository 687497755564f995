"""
Config check use case — validate recipebump.yml and report what it sets.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from recipebump.core.config.loader import build_settings, find_config_file
from recipebump.core.errors import ConfigError
from recipebump.core.models.settings import Settings


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    settings: Settings | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "settings": self.settings.to_dict() if self.settings else None,
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate the configuration file and report issues.

    Args:
        config_path: Optional explicit path to recipebump.yml.

    Returns:
        ConfigCheckResult with validation status and any issues.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_config_file()
    if config_path is None:
        result.warnings.append("No recipebump.yml found; only CLI flags apply.")
    result.config_path = config_path

    try:
        settings = build_settings(config_path=config_path)
    except ConfigError as e:
        result.errors.append(str(e))
        return result
    result.settings = settings

    if not settings.rig and settings.recipes_dir is None:
        result.warnings.append(
            "No rig or recipes_dir set; `update` will need one on the command line."
        )
    elif settings.recipes_dir is not None and not settings.recipes_dir.is_dir():
        result.warnings.append(f"recipes_dir does not exist: {settings.recipes_dir}")

    for override in settings.overrides:
        if override.name in settings.skip:
            result.warnings.append(
                f"'{override.name}' is both skipped and overridden; the skip wins."
            )

    result.valid = not result.errors
    return result
