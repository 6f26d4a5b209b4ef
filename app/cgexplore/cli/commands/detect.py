"""Detect command implementation.

Shows which cgroup hierarchy is active and where it is mounted.
"""

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from cgexplore.cli.types import OutputFormat, VersionChoice, resolve_settings
from cgexplore.utils.formatting import console

app = typer.Typer(
    help="Show the active cgroup hierarchy.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def detect_hierarchy(
    ctx: typer.Context,
    cgroup_version: Annotated[
        VersionChoice | None,
        typer.Option(
            "--cgroup-version",
            help="Hierarchy version: auto, v1 or v2.",
            case_sensitive=False,
        ),
    ] = None,
    root: Annotated[
        Path | None,
        typer.Option("--root", help="Cgroup filesystem mount point."),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", help="Settings file to use."),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format: table or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Detect the cgroup hierarchy version and list v1 controllers."""
    if ctx.invoked_subcommand is not None:
        return

    settings = resolve_settings(config_path, version=cgroup_version, root=root)
    hierarchy = settings.hierarchy()
    subsystems = hierarchy.subsystems()

    if output_format == OutputFormat.JSON:
        data = {
            "version": hierarchy.version.value,
            "root": str(hierarchy.root),
            "controllers": {sub.name: str(sub.root) for sub in subsystems},
        }
        console.print_json(json.dumps(data))
        return

    console.print(f"[header]cgroup {hierarchy.version.value}[/] mounted at {hierarchy.root}")
    if not subsystems:
        return

    table = Table(title="Controllers", show_lines=False)
    table.add_column("Controller", style="bold")
    table.add_column("Root", style="dim")
    table.add_column("Mounted", width=8)
    for sub in subsystems:
        mounted = "[success]yes[/]" if sub.root.is_dir() else "[error]no[/]"
        table.add_row(sub.name, str(sub.root), mounted)
    console.print(table)
