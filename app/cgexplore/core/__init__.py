"""Core building blocks: hierarchy detection and application paths."""

from cgexplore.core.hierarchy import (
    DEFAULT_CGROUP_ROOT,
    Hierarchy,
    HierarchyVersion,
    Subsystem,
    detect_version,
    is_cgroup2_unified_mode,
)

__all__ = [
    "DEFAULT_CGROUP_ROOT",
    "Hierarchy",
    "HierarchyVersion",
    "Subsystem",
    "detect_version",
    "is_cgroup2_unified_mode",
]
