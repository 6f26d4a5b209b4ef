"""Cgroup handles returned by the explorer."""

from cgexplore.cgroup.handle import Cgroup

__all__ = ["Cgroup"]
