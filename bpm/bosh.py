"""Filesystem layout of a BOSH environment."""

from __future__ import annotations

import os
import posixpath
from dataclasses import dataclass

__all__ = ["DEFAULT_ROOT", "Path", "Env"]

DEFAULT_ROOT = "/var/vcap"


def _join(*elements: str) -> str:
    """Join path elements, skipping empty ones, and clean the result."""
    parts = [element for element in elements if element]
    if not parts:
        return ""
    cleaned = posixpath.normpath("/".join(parts))
    if cleaned.startswith("//"):
        cleaned = cleaned[1:]
    return cleaned


@dataclass(frozen=True)
class Path:
    """A directory inside a BOSH root, seen from inside or outside a job.

    The external form is relative to the environment's real root; the
    internal form is relative to the default root used inside a job.
    """

    root: str
    subdir: str = ""

    def internal(self) -> str:
        return _join(DEFAULT_ROOT, self.subdir)

    def external(self) -> str:
        return _join(self.root, self.subdir)

    def join(self, *args: str) -> Path:
        """Return a new Path with ``args`` appended."""
        return Path(self.root, _join(self.subdir, *args))

    def __str__(self) -> str:
        raise TypeError(
            "bosh.Path cannot be converted to a string: "
            "use internal() or external() instead."
        )


class Env:
    """A BOSH environment rooted at a particular directory."""

    def __init__(self, root: str | None = None) -> None:
        self._root = root or DEFAULT_ROOT

    def job_names(self) -> list[str]:
        """Names of all jobs in the environment; empty if there are none."""
        try:
            return sorted(os.listdir(os.path.join(self._root, "jobs")))
        except OSError:
            return []

    def root(self) -> Path:
        return Path(self._root)

    def data_dir(self, job: str) -> Path:
        return Path(self._root, _join("data", job))

    def store_dir(self, job: str) -> Path:
        return Path(self._root, _join("store", job))

    def job_dir(self, job: str) -> Path:
        return Path(self._root, _join("jobs", job))

    def run_dir(self, job: str) -> Path:
        return Path(self._root, _join("sys", "run", job))

    def log_dir(self, job: str) -> Path:
        return Path(self._root, _join("sys", "log", job))

    def package_dir(self) -> Path:
        return Path(self._root, "packages")

    def data_package_dir(self) -> Path:
        return Path(self._root, _join("data", "packages"))