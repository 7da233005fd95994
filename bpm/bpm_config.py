"""Locations and identity of a single job process managed by bpm."""

from __future__ import annotations

import os

from bpm import jobid
from bpm import job_config as _job_config
from bpm.bosh import Env, Path
from bpm.job_config import JobConfig

__all__ = [
    "runc_path",
    "bundles_root",
    "runc_root",
    "locks_path",
    "BPMConfig",
]


def runc_path(env: Env) -> str:
    return env.root().join("packages", "bpm", "bin", "runc").external()


def bundles_root(env: Env) -> str:
    return env.root().join("data", "bpm", "bundles").external()


def runc_root(env: Env) -> str:
    return env.root().join("sys", "run", "bpm-runc").external()


def locks_path(env: Env) -> str:
    return env.root().join("data", "bpm", "locks").external()


class BPMConfig:
    """Paths and identifiers for one process of one job in an environment."""

    def __init__(self, bosh_env: Env, job_name: str, proc_name: str) -> None:
        self.bosh_env = bosh_env
        self.job_name = job_name
        self.proc_name = proc_name

    def __repr__(self) -> str:
        return f"BPMConfig(job_name={self.job_name!r}, proc_name={self.proc_name!r})"

    def data_dir(self) -> Path:
        return self.bosh_env.data_dir(self.job_name)

    def store_dir(self) -> Path:
        return self.bosh_env.store_dir(self.job_name)

    def socket_dir(self) -> Path:
        return self.bosh_env.run_dir(self.job_name)

    def temp_dir(self) -> Path:
        return self.data_dir().join("tmp")

    def log_dir(self) -> Path:
        return self.bosh_env.log_dir(self.job_name)

    def stdout(self) -> Path:
        return self.log_dir().join(f"{self.proc_name}.stdout.log")

    def stderr(self) -> Path:
        return self.log_dir().join(f"{self.proc_name}.stderr.log")

    def pid_dir(self) -> Path:
        return self.bosh_env.run_dir("bpm").join(self.job_name)

    def pid_file(self) -> Path:
        return self.pid_dir().join(f"{self.proc_name}.pid")

    def lock_file(self) -> Path:
        return self.pid_dir().join(f"{self.proc_name}.lock")

    def package_dir(self) -> Path:
        return self.bosh_env.package_dir()

    def data_package_dir(self) -> Path:
        return self.bosh_env.data_package_dir()

    def job_dir(self) -> Path:
        return self.bosh_env.job_dir(self.job_name)

    def job_config(self) -> str:
        """External path of the job's bpm.yml."""
        return self.job_dir().join("config", "bpm.yml").external()

    def tini_path(self) -> Path:
        return self.package_dir().join("bpm", "bin", "tini")

    def default_volumes(self) -> list[str]:
        return [self.data_dir().external(), self.store_dir().external()]

    def parse_job_config(self) -> JobConfig:
        """Parse and validate the job's configuration file."""
        cfg = _job_config.parse_job_config(self.job_config())
        cfg.validate(self.bosh_env, self.default_volumes())
        return cfg

    def bpm_log(self) -> str:
        return self.log_dir().join("bpm.log").external()

    def bundle_path(self) -> str:
        return os.path.join(bundles_root(self.bosh_env), self.job_name, self.proc_name)

    def root_fs_path(self) -> str:
        return os.path.join(self.bundle_path(), "rootfs")

    def container_id(self) -> str:
        """The encoded container ID for this job process."""
        if self.job_name == self.proc_name:
            name = self.job_name
        else:
            name = f"{self.job_name}.{self.proc_name}"
        return jobid.encode(name)