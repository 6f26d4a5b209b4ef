"""Persistent explorer settings."""

from cgexplore.config.settings import (
    ExplorerSettings,
    SettingsError,
    SettingsNotFoundError,
    SettingsParseError,
    get_default_settings,
    load_settings,
    load_settings_or_default,
    save_settings,
)

__all__ = [
    "ExplorerSettings",
    "SettingsError",
    "SettingsNotFoundError",
    "SettingsParseError",
    "get_default_settings",
    "load_settings",
    "load_settings_or_default",
    "save_settings",
]
