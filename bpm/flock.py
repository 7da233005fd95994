"""Cross-process advisory file locks."""

from __future__ import annotations

import fcntl
import os
import threading

__all__ = ["Flock"]


class Flock:
    """A handle on a file that can be exclusively locked and unlocked.

    The file is created if it does not exist; its parent directory must
    already exist. Locks taken through different handles exclude each
    other, within one process and across processes.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = os.fspath(path)
        self._fd: int | None = os.open(self.path, os.O_CREAT | os.O_RDWR, 0o600)
        self._locked = False
        self._mutex = threading.Lock()

    @property
    def locked(self) -> bool:
        """Whether this handle currently holds the lock."""
        return self._locked

    def _descriptor(self) -> int:
        if self._fd is None:
            raise ValueError(f"lock file {self.path} is closed")
        return self._fd

    def lock(self) -> None:
        """Exclusively lock the file, blocking until it is available."""
        with self._mutex:
            fcntl.flock(self._descriptor(), fcntl.LOCK_EX)
            self._locked = True

    def unlock(self) -> None:
        """Release the lock.

        Raises RuntimeError if this handle does not hold the lock.
        """
        with self._mutex:
            if not self._locked:
                raise RuntimeError("flock: unlock of unlocked lock")
            fcntl.flock(self._descriptor(), fcntl.LOCK_UN)
            self._locked = False

    def close(self) -> None:
        """Close the underlying file, which also releases any held lock."""
        with self._mutex:
            if self._fd is not None:
                os.close(self._fd)
                self._fd = None
                self._locked = False

    def __enter__(self) -> Flock:
        self.lock()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.unlock()