"""Scan command implementation.

Lists the cgroups matching the include patterns.
"""

import json
from itertools import islice
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.table import Table

from cgexplore.cgroup.handle import Cgroup
from cgexplore.cli.types import OutputFormat, VersionChoice, resolve_settings
from cgexplore.core.hierarchy import HierarchyVersion
from cgexplore.explorer.explorer import ExplorerBuildError
from cgexplore.utils.formatting import console, format_size, print_error, print_success

app = typer.Typer(
    help="List cgroups matching include patterns.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def scan_cgroups(
    ctx: typer.Context,
    include: Annotated[
        list[str] | None,
        typer.Option(
            "--include",
            "-i",
            help="Glob a cgroup path may match (repeatable).",
        ),
    ] = None,
    regex: Annotated[
        list[str] | None,
        typer.Option(
            "--regex",
            "-r",
            help="Regular expression a cgroup path may match (repeatable).",
        ),
    ] = None,
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
    controller: Annotated[
        list[str] | None,
        typer.Option(
            "--controller",
            "-c",
            help="v1 controller to walk (repeatable).",
        ),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", help="Settings file to use."),
    ] = None,
    memory: Annotated[
        bool,
        typer.Option("--memory", "-m", help="Show current memory usage."),
    ] = False,
    limit: Annotated[
        int | None,
        typer.Option(
            "--limit",
            "-n",
            min=0,
            help="Stop after this many cgroups (the first N by path on v1).",
        ),
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
    """Discover cgroups and display them.

    Patterns given on the command line are added to those from the
    settings file. Without any pattern every cgroup is listed.

    Examples:
        cgexplore scan                          # All cgroups
        cgexplore scan -i 'user.slice/*'        # Below user.slice
        cgexplore scan -r '\\.scope$'            # Scopes only
        cgexplore scan --memory --limit 20      # First 20, with memory usage
        cgexplore scan --format json            # Output as JSON
    """
    # Skip if a subcommand is being invoked
    if ctx.invoked_subcommand is not None:
        return

    settings = resolve_settings(
        config_path,
        version=cgroup_version,
        root=root,
        controllers=controller,
    )

    try:
        explorer = (
            settings.to_builder()
            .include(include or [])
            .include_regex(regex or [])
            .build()
        )
    except ExplorerBuildError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    cgroups_iter = explorer.iter_cgroups()
    # v1 results come out of a set; sort them before applying the limit
    if explorer.version == HierarchyVersion.V1:
        cgroups_iter = iter(sorted(cgroups_iter, key=lambda c: c.path))
    if limit is not None:
        cgroups_iter = islice(cgroups_iter, limit)
    cgroups = list(cgroups_iter)

    if output_format == OutputFormat.JSON:
        _print_json(cgroups, memory)
        return

    if not cgroups:
        print_success("No matching cgroups found.")
        return

    _print_table(cgroups, explorer.version, memory)

    quiet = bool(ctx.obj and ctx.obj.get("quiet"))
    if not quiet:
        console.print(
            f"\n[dim]Found {len(cgroups)} cgroups "
            f"({explorer.version.value} at {explorer.hierarchy.root})[/dim]"
        )


# === Private helper functions ===


def _print_table(cgroups: list[Cgroup], version: HierarchyVersion, memory: bool) -> None:
    """Display cgroups as a Rich table."""
    table = Table(title="Cgroups", show_lines=False)
    table.add_column("Path", style="bold")
    if version == HierarchyVersion.V1:
        table.add_column("Controllers", style="dim")
    if memory:
        table.add_column("Memory", justify="right", width=10)

    for cgroup in cgroups:
        row = [cgroup.path]
        if version == HierarchyVersion.V1:
            row.append(",".join(cgroup.controllers()) or "-")
        if memory:
            row.append(format_size(cgroup.memory_usage()))
        table.add_row(*row)

    console.print(table)


def _cgroup_to_dict(cgroup: Cgroup, memory: bool) -> dict[str, Any]:
    """Convert a Cgroup to a dictionary."""
    data: dict[str, Any] = {
        "path": cgroup.path,
        "version": cgroup.hierarchy.version.value,
    }
    if not cgroup.hierarchy.is_v2:
        data["controllers"] = cgroup.controllers()
    if memory:
        data["memory_bytes"] = cgroup.memory_usage()
    return data


def _print_json(cgroups: list[Cgroup], memory: bool) -> None:
    """Display cgroups as JSON."""
    data = [_cgroup_to_dict(c, memory) for c in cgroups]
    console.print_json(json.dumps(data))
