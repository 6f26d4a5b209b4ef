"""CLI commands for cgexplore.

This package contains all subcommand implementations.
"""

from cgexplore.cli.commands import config, detect, scan

__all__ = ["config", "detect", "scan"]
