"""Carry a process exit status alongside an error."""

from __future__ import annotations

__all__ = ["ExitStatusError", "from_error"]


class ExitStatusError(Exception):
    """An error with an associated exit status to propagate."""

    def __init__(self, status: int, err: BaseException | str) -> None:
        super().__init__(status, err)
        self.status = status
        self.err = err

    def __str__(self) -> str:
        return f"{self.err} (exit status {self.status})"


def from_error(err: BaseException | None) -> int:
    """Return the exit status for ``err``: 0 for none, its status if known, else 1."""
    if err is None:
        return 0
    if isinstance(err, ExitStatusError):
        return err.status
    return 1