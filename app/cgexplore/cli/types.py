"""Shared types and utilities for CLI commands.

This module provides common enums and helper functions used across
multiple CLI command modules to avoid code duplication.
"""

from enum import Enum
from pathlib import Path

import typer

from cgexplore.config.settings import ExplorerSettings, SettingsError, load_settings_or_default
from cgexplore.utils.formatting import print_error


class VersionChoice(str, Enum):
    """Hierarchy version selection for CLI commands."""

    AUTO = "auto"
    V1 = "v1"
    V2 = "v2"


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def resolve_settings(
    config_path: Path | None,
    *,
    version: VersionChoice | None = None,
    root: Path | None = None,
    controllers: list[str] | None = None,
) -> ExplorerSettings:
    """Load settings and apply command line overrides.

    Options left unset on the command line keep their configured value.

    Args:
        config_path: Settings file. If None, uses the default path.
        version: Hierarchy version override.
        root: Cgroup root override.
        controllers: v1 controller override.

    Returns:
        Effective settings.

    Raises:
        typer.Exit: If the settings file is invalid.
    """
    try:
        settings = load_settings_or_default(config_path)
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    overrides: dict[str, object] = {}
    if version is not None:
        overrides["version"] = version.value
    if root is not None:
        overrides["root"] = root
    if controllers:
        overrides["controllers"] = controllers

    if not overrides:
        return settings
    return settings.model_copy(update=overrides)
