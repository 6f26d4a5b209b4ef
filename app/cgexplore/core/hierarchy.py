"""Cgroup hierarchy adapters.

A hierarchy describes where cgroups live on disk. Version 2 exposes a
single unified tree under the cgroup root. Version 1 mounts one tree
per controller, each at ``<root>/<controller>``, and the same cgroup
shows up once in every controller it is attached to.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_CGROUP_ROOT = Path("/sys/fs/cgroup")

_PROC_MOUNTS = Path("/proc/self/mounts")
_PROC_CGROUPS = Path("/proc/cgroups")

# Used when /proc/cgroups cannot be read
DEFAULT_V1_CONTROLLERS: tuple[str, ...] = (
    "cpu",
    "cpuacct",
    "cpuset",
    "memory",
    "blkio",
    "devices",
    "freezer",
    "net_cls",
    "net_prio",
    "perf_event",
    "hugetlb",
    "pids",
)


class HierarchyVersion(str, Enum):
    """Cgroup hierarchy generation.

    Attributes:
        V1: Legacy layout with one subtree per controller.
        V2: Unified layout with a single tree.
    """

    V1 = "v1"
    V2 = "v2"


@dataclass(frozen=True, slots=True)
class Subsystem:
    """A v1 controller and the root of its subtree.

    Attributes:
        name: Controller name (e.g., ``memory``).
        root: Absolute path of the controller's subtree.
    """

    name: str
    root: Path


@dataclass(frozen=True, slots=True)
class Hierarchy:
    """Immutable description of a cgroup hierarchy.

    Attributes:
        version: Hierarchy generation.
        root: Mount point of the cgroup filesystem.
        controllers: Controller names, in walk order (v1 only, empty for v2).
    """

    version: HierarchyVersion
    root: Path = DEFAULT_CGROUP_ROOT
    controllers: tuple[str, ...] = ()

    @classmethod
    def v1(
        cls,
        root: Path | None = None,
        controllers: tuple[str, ...] | list[str] | None = None,
    ) -> "Hierarchy":
        """Create a v1 hierarchy.

        Args:
            root: Cgroup mount point. Defaults to /sys/fs/cgroup.
            controllers: Controller names to walk. Read from /proc/cgroups
                when omitted.

        Returns:
            Hierarchy for the v1 layout.
        """
        if controllers is None:
            controllers = mounted_v1_controllers()
        return cls(
            version=HierarchyVersion.V1,
            root=root or DEFAULT_CGROUP_ROOT,
            controllers=tuple(controllers),
        )

    @classmethod
    def v2(cls, root: Path | None = None) -> "Hierarchy":
        """Create a v2 (unified) hierarchy."""
        return cls(version=HierarchyVersion.V2, root=root or DEFAULT_CGROUP_ROOT)

    @classmethod
    def for_version(
        cls,
        version: HierarchyVersion,
        root: Path | None = None,
        controllers: tuple[str, ...] | list[str] | None = None,
    ) -> "Hierarchy":
        """Create a hierarchy for an explicit version.

        ``controllers`` is ignored for v2.
        """
        if version == HierarchyVersion.V2:
            return cls.v2(root)
        return cls.v1(root, controllers)

    @classmethod
    def auto(
        cls,
        root: Path | None = None,
        controllers: tuple[str, ...] | list[str] | None = None,
    ) -> "Hierarchy":
        """Create a hierarchy for the version active on this system."""
        return cls.for_version(detect_version(root), root, controllers)

    @property
    def is_v2(self) -> bool:
        """Check if this is the unified hierarchy."""
        return self.version == HierarchyVersion.V2

    def subsystems(self) -> tuple[Subsystem, ...]:
        """Return the controller subtrees of a v1 hierarchy.

        Returns:
            One Subsystem per controller, rooted at ``root/<controller>``.
            Empty for v2.
        """
        if self.is_v2:
            return ()
        return tuple(Subsystem(name=name, root=self.root / name) for name in self.controllers)


def parse_proc_mounts(content: str, mount_point: Path) -> bool:
    """Check if a cgroup2 filesystem is mounted at ``mount_point``.

    Args:
        content: Content of /proc/self/mounts.
        mount_point: Expected mount point.

    Returns:
        True if a cgroup2 entry is found for the mount point.
    """
    target = str(mount_point)
    for line in content.splitlines():
        parts = line.split()
        if len(parts) >= 3 and parts[1] == target and parts[2] == "cgroup2":
            return True
    return False


def parse_proc_cgroups(content: str) -> list[str]:
    """Parse /proc/cgroups into a list of mounted v1 controllers.

    Format: ``subsys_name hierarchy num_cgroups enabled``. Controllers
    with a hierarchy id above zero are attached to a v1 hierarchy.

    Args:
        content: Content of /proc/cgroups.

    Returns:
        Enabled v1 controller names, in file order.
    """
    controllers: list[str] = []
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        parts = line.split()
        if len(parts) < 4:
            continue
        try:
            hierarchy_id = int(parts[1])
            enabled = int(parts[3]) == 1
        except ValueError:
            continue
        if hierarchy_id > 0 and enabled:
            controllers.append(parts[0])
    return controllers


def is_cgroup2_unified_mode(
    root: Path | None = None,
    mounts: Path = _PROC_MOUNTS,
) -> bool:
    """Check whether the unified (v2) hierarchy is mounted at the cgroup root.

    Args:
        root: Cgroup mount point. Defaults to /sys/fs/cgroup.
        mounts: Mount table to read.

    Returns:
        True in unified mode, False otherwise (including when the mount
        table cannot be read).
    """
    try:
        content = mounts.read_text()
    except OSError as e:
        logger.debug("Cannot read mount table %s: %s", mounts, e)
        return False
    return parse_proc_mounts(content, root or DEFAULT_CGROUP_ROOT)


def detect_version(root: Path | None = None) -> HierarchyVersion:
    """Detect the hierarchy version in use.

    Falls back to v1 when unified mode is not active.
    """
    if is_cgroup2_unified_mode(root):
        return HierarchyVersion.V2
    return HierarchyVersion.V1


def mounted_v1_controllers(proc_cgroups: Path = _PROC_CGROUPS) -> tuple[str, ...]:
    """Read the list of v1 controllers from /proc/cgroups.

    Returns:
        Controller names, or DEFAULT_V1_CONTROLLERS if the file cannot
        be read.
    """
    try:
        content = proc_cgroups.read_text()
    except OSError as e:
        logger.warning("Cannot read %s, using default controllers: %s", proc_cgroups, e)
        return DEFAULT_V1_CONTROLLERS
    return tuple(parse_proc_cgroups(content))
