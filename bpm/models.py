"""Process state models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

__all__ = ["ProcessState", "Process"]


class ProcessState(str, Enum):
    """Lifecycle states a managed process can be in."""

    FAILED = "failed"
    RUNNING = "running"
    STOPPED = "stopped"
    CREATING = "creating"
    CREATED = "created"

    def __str__(self) -> str:
        return self.value


@dataclass
class Process:
    """A managed process as reported by the container runtime."""

    name: str
    pid: int = 0
    status: str = ""