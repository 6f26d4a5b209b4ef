"""Tests for the cgroup directory walks."""

import logging
import os
from collections.abc import Iterable
from pathlib import Path, PurePosixPath
from unittest.mock import patch

import pytest
from cgexplore.core.hierarchy import Hierarchy
from cgexplore.explorer.filters import PatternFilter
from cgexplore.explorer.walker import collect_v1_paths, iter_v1, iter_v2, walk_directories


def _paths(items: Iterable[PurePosixPath]) -> list[str]:
    return [str(p) for p in items]


class TestWalkDirectories:
    """Tests for walk_directories."""

    def test_depth_first_sorted_order(self, v2_root: Path) -> None:
        """Directories come out depth first, sorted by name at each level."""
        assert _paths(walk_directories(v2_root)) == [
            "init.scope",
            "system.slice",
            "system.slice/cron.service",
            "system.slice/ssh.service",
            "user.slice",
            "user.slice/app-1.scope",
            "user.slice/user-1000.slice",
            "user.slice/user-1000.slice/session-2.scope",
        ]

    def test_root_and_files_skipped(self, v2_root: Path) -> None:
        """The root itself and regular files are never yielded."""
        paths = _paths(walk_directories(v2_root))
        assert "." not in paths
        assert "" not in paths
        assert "README" not in paths
        assert "cgroup.controllers" not in paths

    def test_symlinks_skipped(self, tmp_path: Path) -> None:
        """Symlinks to directories are not followed or yielded."""
        (tmp_path / "real").mkdir()
        (tmp_path / "link").symlink_to(tmp_path / "real", target_is_directory=True)

        assert _paths(walk_directories(tmp_path)) == ["real"]

    def test_yields_relative_paths(self, v2_root: Path) -> None:
        """Yielded paths are relative PurePosixPath objects."""
        first = next(walk_directories(v2_root))
        assert first == PurePosixPath("init.scope")
        assert not first.is_absolute()

    def test_missing_root_raises(self, tmp_path: Path) -> None:
        """A missing root surfaces as an OSError from the walk."""
        with pytest.raises(FileNotFoundError):
            list(walk_directories(tmp_path / "missing"))

    def test_empty_root(self, tmp_path: Path) -> None:
        """An empty root yields nothing."""
        assert list(walk_directories(tmp_path)) == []

    def test_deep_hierarchy(self, tmp_path: Path) -> None:
        """Nesting deeper than the interpreter recursion limit is walked."""
        depth = 1500
        levels = []
        current = tmp_path
        for _ in range(depth):
            current = current / "d"
            current.mkdir()
            levels.append(current)

        try:
            paths = list(walk_directories(tmp_path))
        finally:
            # Remove bottom up; recursive tree removal could hit the same limit
            for level in reversed(levels):
                level.rmdir()

        assert len(paths) == depth
        assert paths[-1] == PurePosixPath("/".join(["d"] * depth))


class TestIterV2:
    """Tests for the unified hierarchy strategy."""

    def test_scenario_no_filter(self, tmp_path: Path) -> None:
        """user.slice and its scope are listed, README is not."""
        (tmp_path / "user.slice" / "app-1.scope").mkdir(parents=True)
        (tmp_path / "README").write_text("hello")

        cgroups = list(iter_v2(Hierarchy.v2(tmp_path), PatternFilter()))

        assert [c.path for c in cgroups] == ["user.slice", "user.slice/app-1.scope"]

    def test_scenario_with_glob(self, tmp_path: Path) -> None:
        """A glob keeps only the matching child."""
        (tmp_path / "user.slice" / "app-1.scope").mkdir(parents=True)
        (tmp_path / "README").write_text("hello")
        pattern_filter = PatternFilter.compile(globs=["user.slice/*"])

        cgroups = list(iter_v2(Hierarchy.v2(tmp_path), pattern_filter))

        assert [c.path for c in cgroups] == ["user.slice/app-1.scope"]

    def test_rejected_directories_still_descended(self, v2_root: Path) -> None:
        """Filtering is per node, children of rejected nodes are visited."""
        pattern_filter = PatternFilter.compile(regexes=[r"session-\d+\.scope$"])

        cgroups = list(iter_v2(Hierarchy.v2(v2_root), pattern_filter))

        assert [c.path for c in cgroups] == ["user.slice/user-1000.slice/session-2.scope"]

    def test_handles_attached_to_hierarchy(self, v2_root: Path) -> None:
        """Every handle carries the walked hierarchy."""
        hierarchy = Hierarchy.v2(v2_root)
        for cgroup in iter_v2(hierarchy, PatternFilter()):
            assert cgroup.hierarchy == hierarchy
            assert cgroup.exists() is True

    def test_is_lazy(self, v2_root: Path) -> None:
        """Nothing is walked until the first item is requested."""
        with patch("cgexplore.explorer.walker.os.scandir", wraps=os.scandir) as mock_scandir:
            cgroups = iter_v2(Hierarchy.v2(v2_root), PatternFilter())
            assert mock_scandir.call_count == 0

            first = next(cgroups)

        assert first.path == "init.scope"
        # Root listing plus the (empty) init.scope listing at most
        assert mock_scandir.call_count <= 2

    def test_missing_root_yields_nothing(self, tmp_path: Path) -> None:
        """A missing root ends the sequence immediately."""
        cgroups = list(iter_v2(Hierarchy.v2(tmp_path / "missing"), PatternFilter()))
        assert cgroups == []

    def test_walk_error_ends_sequence(self, v2_root: Path) -> None:
        """A walk error stops the sequence instead of skipping the node."""
        real_scandir = os.scandir

        def failing_scandir(path: object) -> object:
            if str(path).endswith("system.slice"):
                raise PermissionError("denied")
            return real_scandir(path)  # type: ignore[arg-type]

        with patch("cgexplore.explorer.walker.os.scandir", side_effect=failing_scandir):
            cgroups = list(iter_v2(Hierarchy.v2(v2_root), PatternFilter()))

        # system.slice itself was yielded before its listing failed
        assert [c.path for c in cgroups] == ["init.scope", "system.slice"]


class TestIterV1:
    """Tests for the per-controller strategy."""

    def test_deduplicates_across_controllers(self, v1_root: Path) -> None:
        """A cgroup present in several controllers is yielded once."""
        hierarchy = Hierarchy.v1(v1_root, controllers=("cpu", "memory"))
        pattern_filter = PatternFilter.compile(globs=["svc.slice/job1"])

        cgroups = list(iter_v1(hierarchy, pattern_filter))

        assert [c.path for c in cgroups] == ["svc.slice/job1"]

    def test_union_of_all_controllers(self, v1_root: Path) -> None:
        """Every distinct relative path appears exactly once."""
        hierarchy = Hierarchy.v1(v1_root, controllers=("cpu", "memory"))

        paths = [c.path for c in iter_v1(hierarchy, PatternFilter())]

        assert sorted(paths) == ["cpu-only", "mem-only", "svc.slice", "svc.slice/job1"]
        assert len(paths) == len(set(paths))

    def test_paths_relative_to_controller_root(self, v1_root: Path) -> None:
        """Patterns are matched against the path below the controller."""
        hierarchy = Hierarchy.v1(v1_root, controllers=("cpu", "memory"))
        pattern_filter = PatternFilter.compile(globs=["svc.slice/*"])

        paths = {str(p) for p in collect_v1_paths(hierarchy, pattern_filter)}

        assert paths == {"svc.slice/job1"}

    def test_missing_controller_contributes_nothing(
        self, v1_root: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """An unmounted controller is skipped with a warning, the others still count."""
        hierarchy = Hierarchy.v1(v1_root, controllers=("cpu", "pids", "memory"))

        with caplog.at_level(logging.WARNING):
            paths = {str(p) for p in collect_v1_paths(hierarchy, PatternFilter())}

        assert paths == {"cpu-only", "mem-only", "svc.slice", "svc.slice/job1"}
        assert "Skipping controller pids" in caplog.text

    def test_failing_controller_drops_its_partial_results(self, v1_root: Path) -> None:
        """A walk error discards everything that controller had found."""
        real_scandir = os.scandir

        def failing_scandir(path: object) -> object:
            if str(path).endswith(os.path.join("memory", "svc.slice")):
                raise PermissionError("denied")
            return real_scandir(path)  # type: ignore[arg-type]

        hierarchy = Hierarchy.v1(v1_root, controllers=("cpu", "memory"))
        with patch("cgexplore.explorer.walker.os.scandir", side_effect=failing_scandir):
            paths = {str(p) for p in collect_v1_paths(hierarchy, PatternFilter())}

        # mem-only was seen before the failure but is dropped with the rest
        assert paths == {"cpu-only", "svc.slice", "svc.slice/job1"}

    def test_handles_attached_to_v1_hierarchy(self, v1_root: Path) -> None:
        """Handles carry the v1 hierarchy."""
        hierarchy = Hierarchy.v1(v1_root, controllers=("cpu", "memory"))
        for cgroup in iter_v1(hierarchy, PatternFilter()):
            assert cgroup.hierarchy == hierarchy
