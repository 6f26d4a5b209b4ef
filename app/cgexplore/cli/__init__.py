"""CLI package for cgexplore.

This package contains the Typer application and all subcommands.
"""

from cgexplore.cli.main import app

__all__ = ["app"]
