"""Entry point of the ``cgexplore`` command.

Global flags are handled here: ``--verbose`` switches logging to DEBUG
and ``--quiet`` hides summary lines. The ``scan``, ``detect`` and
``config`` sub-apps live in ``cgexplore.cli.commands``.
"""

from typing import Annotated

import typer

from cgexplore import __version__
from cgexplore.cli.commands import config, detect, scan
from cgexplore.utils.logging import setup_logging

# Create main Typer app
app = typer.Typer(
    name="cgexplore",
    help="Discover cgroups matching glob and regex patterns.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Handle --version before any sub-app runs."""
    if value:
        typer.echo(f"cgexplore version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Hide the summary line after results.",
        ),
    ] = False,
) -> None:
    """cgexplore - discover cgroups on cgroup v1 and v2 hosts.

    Walks the cgroup filesystem and lists every cgroup whose path
    matches the configured include patterns.
    """
    setup_logging(verbose)

    # scan reads "quiet" to decide on the summary line
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


# Sub-apps, in help order
app.add_typer(scan.app, name="scan")
app.add_typer(detect.app, name="detect")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
