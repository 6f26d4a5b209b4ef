"""Explorer: configured, reusable cgroup discovery.

Example:
    >>> explorer = Explorer.detect_version().include(["user.slice/*"]).build()
    >>> for cgroup in explorer.iter_cgroups():
    ...     print(cgroup.path)
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path, PurePath

from cgexplore.cgroup.handle import Cgroup
from cgexplore.core.hierarchy import Hierarchy, HierarchyVersion
from cgexplore.explorer.filters import PatternError, PatternFilter, PatternKind
from cgexplore.explorer.walker import iter_v1, iter_v2

logger = logging.getLogger(__name__)


class ExplorerError(Exception):
    """Base exception for explorer errors."""


class ExplorerBuildError(ExplorerError):
    """Raised by ExplorerBuilder.build() when a pattern is malformed.

    Attributes:
        pattern: First pattern that failed to compile.
        kind: Glob or regex.
        reason: Underlying syntax error.
    """

    def __init__(self, error: PatternError) -> None:
        self.pattern = error.pattern
        self.kind: PatternKind = error.kind
        self.reason = error.reason
        super().__init__(str(error))


@dataclass(frozen=True, slots=True)
class Explorer:
    """Enumerates cgroups of one hierarchy that match include patterns.

    Instances are immutable and created through ExplorerBuilder. Every
    call to iter_cgroups() walks the filesystem again.

    Attributes:
        hierarchy: Hierarchy to explore.
        pattern_filter: Compiled include globs and regexes.
    """

    hierarchy: Hierarchy
    pattern_filter: PatternFilter = PatternFilter()

    @staticmethod
    def builder(hierarchy: Hierarchy) -> "ExplorerBuilder":
        """Start a builder for an existing hierarchy."""
        return ExplorerBuilder(hierarchy)

    @staticmethod
    def v1(
        root: Path | None = None,
        controllers: tuple[str, ...] | list[str] | None = None,
    ) -> "ExplorerBuilder":
        """Start a builder for cgroups v1."""
        return ExplorerBuilder(Hierarchy.v1(root, controllers))

    @staticmethod
    def v2(root: Path | None = None) -> "ExplorerBuilder":
        """Start a builder for cgroups v2."""
        return ExplorerBuilder(Hierarchy.v2(root))

    @staticmethod
    def for_version(
        version: HierarchyVersion,
        root: Path | None = None,
        controllers: tuple[str, ...] | list[str] | None = None,
    ) -> "ExplorerBuilder":
        """Start a builder for an explicit hierarchy version."""
        return ExplorerBuilder(Hierarchy.for_version(version, root, controllers))

    @staticmethod
    def detect_version(
        root: Path | None = None,
        controllers: tuple[str, ...] | list[str] | None = None,
    ) -> "ExplorerBuilder":
        """Start a builder for the hierarchy version active on this system."""
        return ExplorerBuilder(Hierarchy.auto(root, controllers))

    @property
    def version(self) -> HierarchyVersion:
        """Hierarchy version being explored."""
        return self.hierarchy.version

    def matches(self, relative_path: PurePath | str) -> bool:
        """Check if a relative cgroup path passes the include patterns."""
        return self.pattern_filter.matches(relative_path)

    def iter_cgroups(self) -> Iterator[Cgroup]:
        """Iterate over all cgroups matching the include patterns.

        On v2 the walk is lazy and ordered by name, depth first. On v1
        every controller subtree is walked before the first result and
        the order is unspecified; each relative path appears once.

        Returns:
            Single-pass iterator of Cgroup handles.
        """
        logger.debug(
            "Exploring %s hierarchy at %s", self.hierarchy.version.value, self.hierarchy.root
        )
        if self.hierarchy.is_v2:
            return iter_v2(self.hierarchy, self.pattern_filter)
        return iter_v1(self.hierarchy, self.pattern_filter)


class ExplorerBuilder:
    """Collects raw include patterns and validates them in build().

    Args:
        hierarchy: Hierarchy the built Explorer will walk.
    """

    def __init__(self, hierarchy: Hierarchy) -> None:
        self._hierarchy = hierarchy
        self._include: list[str] = []
        self._include_regex: list[str] = []

    @property
    def hierarchy(self) -> Hierarchy:
        """Hierarchy the built Explorer will walk."""
        return self._hierarchy

    def include(self, patterns: Iterable[str]) -> "ExplorerBuilder":
        """Add glob patterns a cgroup path may match.

        Returns:
            The builder, for chaining.
        """
        self._include.extend(patterns)
        return self

    def include_regex(self, patterns: Iterable[str]) -> "ExplorerBuilder":
        """Add regular expressions a cgroup path may match.

        Returns:
            The builder, for chaining.
        """
        self._include_regex.extend(patterns)
        return self

    def build(self) -> Explorer:
        """Compile all patterns and create the Explorer.

        Raises:
            ExplorerBuildError: For the first pattern that fails to compile.
        """
        try:
            pattern_filter = PatternFilter.compile(self._include, self._include_regex)
        except PatternError as e:
            raise ExplorerBuildError(e) from e
        return Explorer(hierarchy=self._hierarchy, pattern_filter=pattern_filter)
