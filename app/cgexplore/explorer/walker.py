"""Directory walks over cgroup hierarchies.

The v2 walk streams: every accepted directory is turned into a handle
only when the caller asks for the next one. The v1 walk must see every
controller subtree before it can merge them, so it collects all
accepted paths first and then hands them out one by one. The v1
order is unspecified.
"""

import logging
import os
from collections.abc import Iterator
from pathlib import Path, PurePosixPath

from cgexplore.cgroup.handle import Cgroup
from cgexplore.core.hierarchy import Hierarchy
from cgexplore.explorer.filters import PatternFilter

logger = logging.getLogger(__name__)


def walk_directories(root: Path) -> Iterator[PurePosixPath]:
    """Walk every directory strictly below ``root``.

    Depth-first and pre-order, with entries sorted by name at each
    level. Files and symlinks are skipped. The root itself is never
    yielded.

    Args:
        root: Directory to walk.

    Yields:
        Paths relative to ``root``.

    Raises:
        OSError: If a directory cannot be listed. The walk stops there.
    """
    # One iterator of pending children per open directory level
    stack = [_subdirectories(Path(root), PurePosixPath())]
    while stack:
        entry = next(stack[-1], None)
        if entry is None:
            stack.pop()
            continue
        path, relative = entry
        yield relative
        stack.append(_subdirectories(path, relative))


def _subdirectories(
    directory: Path, relative: PurePosixPath
) -> Iterator[tuple[Path, PurePosixPath]]:
    """List real subdirectories of a directory, sorted by name."""
    with os.scandir(directory) as it:
        entries = sorted(it, key=lambda e: e.name)

    return iter(
        [
            (Path(entry.path), relative / entry.name)
            for entry in entries
            if entry.is_dir(follow_symlinks=False)
        ]
    )


def iter_v2(hierarchy: Hierarchy, pattern_filter: PatternFilter) -> Iterator[Cgroup]:
    """Lazily yield cgroups of a unified hierarchy.

    Rejected directories are still descended into. If the walk fails
    the sequence ends at that point.

    Args:
        hierarchy: Unified hierarchy to walk.
        pattern_filter: Include filter applied to each relative path.

    Yields:
        Cgroup handles in walk order.
    """
    walker = walk_directories(hierarchy.root)
    while True:
        try:
            relative = next(walker)
        except StopIteration:
            return
        except OSError as e:
            logger.debug("Walk of %s stopped: %s", hierarchy.root, e)
            return

        if pattern_filter.matches(relative):
            yield Cgroup(hierarchy, relative)


def collect_v1_paths(hierarchy: Hierarchy, pattern_filter: PatternFilter) -> set[PurePosixPath]:
    """Collect accepted relative paths across all controller subtrees.

    A cgroup attached to several controllers appears once. A subtree
    whose walk fails contributes nothing; the others are unaffected.

    Args:
        hierarchy: v1 hierarchy to walk.
        pattern_filter: Include filter applied to each relative path.

    Returns:
        Set of accepted paths relative to their controller root.
    """
    found: set[PurePosixPath] = set()
    for subsystem in hierarchy.subsystems():
        accepted: set[PurePosixPath] = set()
        try:
            for relative in walk_directories(subsystem.root):
                if pattern_filter.matches(relative):
                    accepted.add(relative)
        except OSError as e:
            logger.warning("Skipping controller %s (%s): %s", subsystem.name, subsystem.root, e)
            continue
        logger.debug("Controller %s: %d matching cgroups", subsystem.name, len(accepted))
        found |= accepted
    return found


def iter_v1(hierarchy: Hierarchy, pattern_filter: PatternFilter) -> Iterator[Cgroup]:
    """Yield cgroups of a v1 hierarchy, one per distinct relative path.

    All controller subtrees are walked before the first handle is
    yielded.
    """
    for relative in collect_v1_paths(hierarchy, pattern_filter):
        yield Cgroup(hierarchy, relative)
