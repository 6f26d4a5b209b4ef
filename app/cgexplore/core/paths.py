"""Where cgexplore keeps its settings file.

Only a configuration directory is needed: discovery results are never
cached and no state is kept between runs. The directory follows
``$XDG_CONFIG_HOME`` and falls back to ``~/.config``.
"""

import os
from pathlib import Path

APP_NAME = "cgexplore"

SETTINGS_FILENAME = "config.toml"


def get_config_dir() -> Path:
    """Directory holding the cgexplore settings file.

    Returns:
        ``$XDG_CONFIG_HOME/cgexplore`` when the variable is set and not
        empty, otherwise ``~/.config/cgexplore``.
    """
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_settings_path() -> Path:
    """Settings file read by ``scan``/``detect`` when ``--config`` is omitted."""
    return get_config_dir() / SETTINGS_FILENAME
