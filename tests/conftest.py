"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules. The
fixtures build small fake cgroup filesystems under ``tmp_path``.
"""

import logging
from pathlib import Path

import pytest


def make_dirs(root: Path, *relative: str) -> None:
    """Create directories below root (parents included)."""
    for rel in relative:
        (root / rel).mkdir(parents=True, exist_ok=True)


@pytest.fixture
def v2_root(tmp_path: Path) -> Path:
    """Unified hierarchy with a few slices, scopes and stray files.

    Layout::

        cgroup/
            README                      (file)
            cgroup.controllers          (file)
            init.scope/
            system.slice/
                cron.service/
                ssh.service/
            user.slice/
                app-1.scope/
                user-1000.slice/
                    session-2.scope/
    """
    root = tmp_path / "cgroup"
    make_dirs(
        root,
        "init.scope",
        "system.slice/cron.service",
        "system.slice/ssh.service",
        "user.slice/app-1.scope",
        "user.slice/user-1000.slice/session-2.scope",
    )
    (root / "README").write_text("not a cgroup")
    (root / "cgroup.controllers").write_text("cpu memory pids\n")
    (root / "user.slice" / "memory.current").write_text("4096\n")
    (root / "user.slice" / "cgroup.controllers").write_text("cpu memory\n")
    return root


@pytest.fixture
def v1_root(tmp_path: Path) -> Path:
    """v1 hierarchy with cpu and memory controllers sharing cgroups.

    Layout::

        cgroup/
            cpu/
                svc.slice/job1/
                cpu-only/
            memory/
                svc.slice/job1/
                mem-only/
    """
    root = tmp_path / "cgroup"
    make_dirs(
        root,
        "cpu/svc.slice/job1",
        "cpu/cpu-only",
        "memory/svc.slice/job1",
        "memory/mem-only",
    )
    (root / "cpu" / "tasks").write_text("")
    (root / "memory" / "svc.slice" / "memory.usage_in_bytes").write_text("8192\n")
    return root


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo handler and level changes made by setup_logging."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
