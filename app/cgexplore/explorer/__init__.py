"""Cgroup discovery: include filters, directory walks and the Explorer."""

from cgexplore.explorer.explorer import (
    Explorer,
    ExplorerBuildError,
    ExplorerBuilder,
    ExplorerError,
)
from cgexplore.explorer.filters import PatternError, PatternFilter, PatternKind

__all__ = [
    "Explorer",
    "ExplorerBuildError",
    "ExplorerBuilder",
    "ExplorerError",
    "PatternError",
    "PatternFilter",
    "PatternKind",
]
