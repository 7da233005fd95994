import pytest

from bpm import cgroups
from bpm.cgroups import subsystem_grouping, subsystem_grouping_from_proc_cgroup

_GROUPINGS = [
    "devices",
    "cpu,cpuacct",
    "rdma",
    "cpuset",
    "freezer",
    "perf_event",
    "net_cls,net_prio",
    "hugetlb",
    "blkio",
    "memory",
    "pids",
    "name=systemd",
]


def _lines():
    count = len(_GROUPINGS)
    return [
        f"{count - offset}:{grouping}:/example-container\n"
        for offset, grouping in enumerate(_GROUPINGS)
    ]


def test_singleton_groups():
    assert subsystem_grouping_from_proc_cgroup(_lines(), "memory") == "memory"


def test_grouped_subsystems():
    assert subsystem_grouping_from_proc_cgroup(_lines(), "cpu") == "cpu,cpuacct"
    assert subsystem_grouping_from_proc_cgroup(_lines(), "net_prio") == "net_cls,net_prio"


def test_unknown_subsystem_stands_alone():
    assert subsystem_grouping_from_proc_cgroup(_lines(), "misc") == "misc"


def test_malformed_line_raises():
    with pytest.raises(ValueError):
        subsystem_grouping_from_proc_cgroup(["garbage\n"], "memory")


def test_reads_proc_file(tmp_path, monkeypatch):
    proc = tmp_path / "cgroup"
    proc.write_text("".join(_lines()))
    monkeypatch.setattr(cgroups, "_PROC_CGROUP", str(proc))
    assert subsystem_grouping("cpuacct") == "cpu,cpuacct"


def test_missing_proc_file_returns_subsystem(tmp_path, monkeypatch):
    monkeypatch.setattr(cgroups, "_PROC_CGROUP", str(tmp_path / "missing"))
    assert subsystem_grouping("cpu") == "cpu"