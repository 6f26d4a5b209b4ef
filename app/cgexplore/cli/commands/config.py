"""Settings file commands.

Provides commands to inspect and create the cgexplore settings file.
"""

from pathlib import Path
from typing import Annotated

import tomli_w
import typer

from cgexplore.config.settings import (
    SettingsError,
    get_default_settings,
    load_settings_or_default,
    save_settings,
    settings_to_dict,
)
from cgexplore.core.paths import get_settings_path
from cgexplore.utils.formatting import console, print_error, print_success, print_warning

app = typer.Typer(
    help="Inspect and create the settings file.",
    invoke_without_command=True,
    no_args_is_help=True,
)


@app.command()
def show(
    config_path: Annotated[
        Path | None,
        typer.Option("--config", help="Settings file to read."),
    ] = None,
) -> None:
    """Print the effective settings as TOML."""
    try:
        settings = load_settings_or_default(config_path)
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    console.print(tomli_w.dumps(settings_to_dict(settings)), markup=False, highlight=False)


@app.command()
def init(
    config_path: Annotated[
        Path | None,
        typer.Option("--config", help="Settings file to create."),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing settings file."),
    ] = False,
) -> None:
    """Write a settings file with default values."""
    target = config_path or get_settings_path()
    if target.exists() and not force:
        print_warning(f"Settings file already exists: {target} (use --force to overwrite)")
        raise typer.Exit(code=1)

    try:
        saved = save_settings(get_default_settings(), target)
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Settings written to {saved}")


@app.command()
def path() -> None:
    """Print the default settings file path."""
    typer.echo(str(get_settings_path()))
