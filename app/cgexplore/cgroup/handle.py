"""Handle to a discovered cgroup.

A handle only remembers the hierarchy and the cgroup path relative to
it. Everything else (existence, attached controllers, stats) is read
from the cgroup filesystem on demand and never cached.
"""

from pathlib import Path, PurePosixPath

from cgexplore.core.hierarchy import Hierarchy


class Cgroup:
    """A cgroup within a hierarchy.

    Args:
        hierarchy: Hierarchy the cgroup belongs to.
        path: Path relative to the hierarchy root (v2) or to each
            controller root (v1). A leading slash is ignored.

    Example:
        >>> cg = Cgroup(Hierarchy.v2(), "user.slice")
        >>> cg.exists()
        True
    """

    __slots__ = ("_hierarchy", "_path")

    def __init__(self, hierarchy: Hierarchy, path: str | PurePosixPath) -> None:
        relative = PurePosixPath(path)
        if relative.is_absolute():
            relative = relative.relative_to("/")
        self._hierarchy = hierarchy
        self._path = relative

    def __repr__(self) -> str:
        return f"Cgroup({self._hierarchy.version.value}, {self.path!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cgroup):
            return NotImplemented
        return self._hierarchy == other._hierarchy and self._path == other._path

    def __hash__(self) -> int:
        return hash((self._hierarchy, self._path))

    @property
    def hierarchy(self) -> Hierarchy:
        """Hierarchy this cgroup belongs to."""
        return self._hierarchy

    @property
    def path(self) -> str:
        """Path relative to the hierarchy (or controller) root."""
        return str(self._path)

    def paths(self) -> list[Path]:
        """Absolute directories backing this cgroup.

        Returns:
            A single directory for v2, one per controller for v1.
        """
        if self._hierarchy.is_v2:
            return [self._hierarchy.root / self._path]
        return [sub.root / self._path for sub in self._hierarchy.subsystems()]

    def controller_path(self, controller: str) -> Path:
        """Directory holding a controller's files for this cgroup.

        On v2 all controllers share the cgroup directory.

        Raises:
            KeyError: If a v1 hierarchy has no such controller.
        """
        if self._hierarchy.is_v2:
            return self._hierarchy.root / self._path
        for sub in self._hierarchy.subsystems():
            if sub.name == controller:
                return sub.root / self._path
        raise KeyError(f"Controller not in hierarchy: {controller}")

    def exists(self) -> bool:
        """Check if the cgroup directory exists under any backing root."""
        return any(p.is_dir() for p in self.paths())

    def controllers(self) -> list[str]:
        """List controllers available to this cgroup.

        On v2 this is the content of ``cgroup.controllers``. On v1 it is
        every controller whose subtree contains the cgroup.

        Raises:
            OSError: If ``cgroup.controllers`` cannot be read (v2).
        """
        if self._hierarchy.is_v2:
            return self.read("", "cgroup.controllers").split()
        return [
            sub.name for sub in self._hierarchy.subsystems() if (sub.root / self._path).is_dir()
        ]

    def read(self, controller: str, filename: str) -> str:
        """Read a raw control file.

        Args:
            controller: Controller owning the file (selects the subtree
                on v1, ignored on v2).
            filename: File name inside the cgroup directory.

        Raises:
            KeyError: If a v1 hierarchy has no such controller.
            OSError: If the file cannot be read.
        """
        return (self.controller_path(controller) / filename).read_text()

    def memory_usage(self) -> int | None:
        """Current memory usage in bytes.

        Returns:
            Value of ``memory.current`` (v2) or ``memory.usage_in_bytes``
            (v1), or None if the memory controller is not available.
        """
        filename = "memory.current" if self._hierarchy.is_v2 else "memory.usage_in_bytes"
        try:
            return int(self.read("memory", filename).strip())
        except (KeyError, OSError, ValueError):
            return None
