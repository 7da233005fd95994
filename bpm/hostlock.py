"""Host-wide advisory locks for jobs and volumes."""

from __future__ import annotations

import hashlib
import os
from typing import Protocol

from bpm import jobid
from bpm.flock import Flock

__all__ = ["LockedLock", "Handle"]


class LockedLock(Protocol):
    """A lock that has been acquired and can be released."""

    def unlock(self) -> None: ...


class Handle:
    """A namespace of locks kept in an existing directory."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = os.fspath(path)

    def _acquire(self, filename: str) -> Flock:
        fl = Flock(os.path.join(self.path, filename))
        try:
            fl.lock()
        except BaseException:
            fl.close()
            raise
        return fl

    def lock_job(self, job: str, process: str) -> Flock:
        """Exclusively lock a job's process, blocking until available."""
        name = jobid.encode(f"{job}.{process}")
        return self._acquire(f"job-{name}.lock")

    def lock_volume(self, path: str) -> Flock:
        """Exclusively lock a volume path, blocking until available."""
        digest = hashlib.sha256(path.encode("utf-8", "surrogateescape")).hexdigest()
        return self._acquire(f"vol-{digest}.lock")