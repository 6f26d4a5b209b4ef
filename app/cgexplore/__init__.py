"""cgexplore - discover cgroups matching glob and regex criteria.

Works on both cgroup hierarchy generations: the per-controller v1
layout and the unified v2 tree.
"""

from cgexplore.cgroup.handle import Cgroup
from cgexplore.core.hierarchy import Hierarchy, HierarchyVersion, Subsystem
from cgexplore.explorer.explorer import Explorer, ExplorerBuilder, ExplorerBuildError

__version__ = "0.4.1"

__all__ = [
    "Cgroup",
    "Explorer",
    "ExplorerBuildError",
    "ExplorerBuilder",
    "Hierarchy",
    "HierarchyVersion",
    "Subsystem",
    "__version__",
]
