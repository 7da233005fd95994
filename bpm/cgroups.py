"""Discovery of how cgroup subsystems are grouped for the current process."""

from __future__ import annotations

from collections.abc import Iterable

__all__ = ["subsystem_grouping", "subsystem_grouping_from_proc_cgroup"]

CGROUP_ROOT = "/sys/fs/cgroup"
_PROC_CGROUP = "/proc/self/cgroup"


def subsystem_grouping(subsystem: str) -> str:
    """Return the comma-separated grouping the subsystem is mounted with.

    If the current process is not in a cgroup the subsystem stands alone.
    """
    try:
        with open(_PROC_CGROUP, encoding="utf-8") as handle:
            return subsystem_grouping_from_proc_cgroup(handle, subsystem)
    except FileNotFoundError:
        return subsystem


def subsystem_grouping_from_proc_cgroup(lines: Iterable[str], subsystem: str) -> str:
    """Find the grouping of ``subsystem`` in lines formatted like /proc/self/cgroup."""
    for line in lines:
        fields = line.rstrip("\n").split(":")
        if len(fields) < 2:
            raise ValueError(f"malformed cgroup line: {line!r}")
        grouping = fields[1]
        if subsystem in grouping.split(","):
            return grouping
    return subsystem