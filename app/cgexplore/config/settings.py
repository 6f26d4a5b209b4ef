"""Explorer settings file.

Default include patterns and hierarchy selection can be stored in
~/.config/cgexplore/config.toml so that they do not have to be passed
on every invocation. Command line flags take precedence.

Example file::

    version = "auto"
    include = ["user.slice/*", "system.slice/*.service"]
    include_regex = ["^machine\\.slice/"]
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Literal

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cgexplore.core.hierarchy import Hierarchy, HierarchyVersion
from cgexplore.core.paths import get_settings_path
from cgexplore.explorer.explorer import ExplorerBuilder

logger = logging.getLogger(__name__)

VersionChoice = Literal["auto", "v1", "v2"]


class ExplorerSettings(BaseModel):
    """Persistent explorer configuration.

    Attributes:
        version: Hierarchy version, or "auto" to detect it.
        root: Cgroup mount point (None = /sys/fs/cgroup).
        controllers: v1 controllers to walk (None = read /proc/cgroups).
        include: Glob patterns a cgroup path may match.
        include_regex: Regular expressions a cgroup path may match.
    """

    model_config = ConfigDict(extra="forbid")

    version: Annotated[
        VersionChoice,
        Field(description="Hierarchy version (auto, v1 or v2)"),
    ] = "auto"
    root: Annotated[
        Path | None,
        Field(description="Cgroup mount point (None = /sys/fs/cgroup)"),
    ] = None
    controllers: Annotated[
        list[str] | None,
        Field(description="v1 controllers to walk (None = from /proc/cgroups)"),
    ] = None
    include: Annotated[
        list[str],
        Field(description="Include globs"),
    ] = []
    include_regex: Annotated[
        list[str],
        Field(description="Include regular expressions"),
    ] = []

    def hierarchy(self) -> Hierarchy:
        """Resolve the configured hierarchy, detecting the version if needed."""
        if self.version == "auto":
            return Hierarchy.auto(self.root, self.controllers)
        return Hierarchy.for_version(HierarchyVersion(self.version), self.root, self.controllers)

    def to_builder(self) -> ExplorerBuilder:
        """Create an ExplorerBuilder preloaded with these settings."""
        return (
            ExplorerBuilder(self.hierarchy())
            .include(self.include)
            .include_regex(self.include_regex)
        )


class SettingsError(Exception):
    """Base exception for settings errors."""


class SettingsNotFoundError(SettingsError):
    """Raised when the settings file is not found."""


class SettingsParseError(SettingsError):
    """Raised when the settings file cannot be parsed."""


def load_settings(path: Path | None = None) -> ExplorerSettings:
    """Load settings from a TOML file.

    Args:
        path: Path to the settings file. If None, uses the default path.

    Returns:
        Validated ExplorerSettings object.

    Raises:
        SettingsNotFoundError: If the file doesn't exist.
        SettingsParseError: If the TOML syntax is invalid.
        SettingsError: If the content doesn't match the schema.
    """
    settings_path = path or get_settings_path()

    if not settings_path.exists():
        raise SettingsNotFoundError(f"Settings not found: {settings_path}")

    try:
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise SettingsParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise SettingsError(f"Failed to read settings: {e}") from e

    try:
        settings = ExplorerSettings.model_validate(data)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings content: {e}") from e

    logger.debug("Loaded settings from %s", settings_path)
    return settings


def load_settings_or_default(path: Path | None = None) -> ExplorerSettings:
    """Load settings, falling back to defaults if the file is missing.

    Raises:
        SettingsError: If the file exists but is invalid.
    """
    try:
        return load_settings(path)
    except SettingsNotFoundError:
        return get_default_settings()


def save_settings(settings: ExplorerSettings, path: Path | None = None) -> Path:
    """Save settings to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        settings: The settings to save.
        path: Destination. If None, uses the default path.

    Returns:
        Path where the settings were saved.

    Raises:
        SettingsError: If the file cannot be written.
    """
    settings_path = path or get_settings_path()
    settings_path.parent.mkdir(parents=True, exist_ok=True)

    data = settings_to_dict(settings)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=settings_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(settings_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise SettingsError(f"Failed to write settings: {e}") from e

    return settings_path


def settings_to_dict(settings: ExplorerSettings) -> dict[str, object]:
    """Convert settings to a TOML-serializable dictionary.

    None values are omitted since TOML has no null.
    """
    result: dict[str, object] = {"version": settings.version}

    if settings.root is not None:
        result["root"] = str(settings.root)

    if settings.controllers is not None:
        result["controllers"] = list(settings.controllers)

    result["include"] = list(settings.include)
    result["include_regex"] = list(settings.include_regex)
    return result


def get_default_settings() -> ExplorerSettings:
    """Create default settings (auto-detect, no filters)."""
    return ExplorerSettings()
