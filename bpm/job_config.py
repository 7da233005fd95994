"""Job configuration files (bpm.yml) and their validation."""

from __future__ import annotations

import posixpath
import signal
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import yaml

from bpm.bosh import Env

__all__ = [
    "ConfigError",
    "ShutdownSignal",
    "Volume",
    "Limits",
    "Hooks",
    "Unsafe",
    "ProcessConfig",
    "JobConfig",
    "parse_job_config",
]


class ConfigError(ValueError):
    """Raised when a job configuration is malformed or invalid."""


class ShutdownSignal(Enum):
    """Signals a process may be asked to shut down with."""

    TERM = "TERM"
    INT = "INT"

    @property
    def signum(self) -> int:
        return signal.SIGINT if self is ShutdownSignal.INT else signal.SIGTERM


_VOLUME_OPTIONS = ("writable", "mount_only", "allow_executions", "shared")


def _clean(path: str) -> str:
    """Lexically clean a slash-separated path."""
    cleaned = posixpath.normpath(path)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def _path_is_in(path: str, *prefixes: str) -> bool:
    """Whether ``path`` lies strictly below one of ``prefixes``."""
    parts = path.split("/")
    for prefix in prefixes:
        valid = prefix.split("/")
        if len(parts) <= len(valid):
            continue
        if parts[: len(valid)] == valid:
            return True
    return False


def _mapping(value: Any, what: str) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{what} must be a mapping, got {type(value).__name__}")
    return value


def _str(value: Any, what: str) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ConfigError(f"{what} must be a string, got {type(value).__name__}")


def _bool(value: Any, what: str) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ConfigError(f"{what} must be a boolean, got {value!r}")
    return value


def _int(value: Any, what: str, *, minimum: int | None = None) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{what} must be an integer, got {value!r}")
    if minimum is not None and value < minimum:
        raise ConfigError(f"{what} must be at least {minimum}, got {value}")
    return value


def _list(value: Any, what: str) -> list:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(f"{what} must be a list, got {type(value).__name__}")
    return value


def _str_list(value: Any, what: str) -> list[str]:
    return [_str(item, what) for item in _list(value, what)]


def _str_map(value: Any, what: str) -> dict[str, str]:
    return {_str(k, what): _str(v, what) for k, v in _mapping(value, what).items()}


@dataclass(frozen=True)
class Volume:
    """An additional directory mounted into a job's container."""

    path: str = ""
    writable: bool = False
    allow_executions: bool = False
    mount_only: bool = False
    shared: bool = False

    @classmethod
    def _from_yaml(cls, data: Any) -> Volume:
        data = _mapping(data, "volume")
        return cls(
            path=_str(data.get("path"), "volume path"),
            writable=_bool(data.get("writable"), "writable"),
            allow_executions=_bool(data.get("allow_executions"), "allow_executions"),
            mount_only=_bool(data.get("mount_only"), "mount_only"),
            shared=_bool(data.get("shared"), "shared"),
        )


@dataclass
class Limits:
    """Resource limits for a process; None means unlimited."""

    memory: str | None = None
    open_files: int | None = None
    processes: int | None = None

    @classmethod
    def _from_yaml(cls, data: Any) -> Limits:
        data = _mapping(data, "limits")
        memory = data.get("memory")
        return cls(
            memory=None if memory is None else _str(memory, "memory limit"),
            open_files=_int(data.get("open_files"), "open_files limit", minimum=0),
            processes=_int(data.get("processes"), "processes limit"),
        )


@dataclass
class Hooks:
    """Lifecycle hooks of a process."""

    pre_start: str = ""

    @classmethod
    def _from_yaml(cls, data: Any) -> Hooks:
        data = _mapping(data, "hooks")
        return cls(pre_start=_str(data.get("pre_start"), "pre_start"))


@dataclass
class Unsafe:
    """Settings that weaken the isolation of a process."""

    privileged: bool = False
    unrestricted_volumes: list[Volume] = field(default_factory=list)
    host_pid_namespace: bool = False

    @classmethod
    def _from_yaml(cls, data: Any) -> Unsafe:
        data = _mapping(data, "unsafe")
        return cls(
            privileged=_bool(data.get("privileged"), "privileged"),
            unrestricted_volumes=[
                Volume._from_yaml(v)
                for v in _list(data.get("unrestricted_volumes"), "unrestricted_volumes")
            ],
            host_pid_namespace=_bool(data.get("host_pid_namespace"), "host_pid_namespace"),
        )


@dataclass
class ProcessConfig:
    """Configuration of a single process within a job."""

    name: str = ""
    executable: str = ""
    args: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)
    additional_volumes: list[Volume] = field(default_factory=list)
    capabilities: list[str] = field(default_factory=list)
    ephemeral_disk: bool = False
    hooks: Hooks | None = None
    limits: Limits | None = None
    persistent_disk: bool = False
    workdir: str = ""
    unsafe: Unsafe | None = None
    shutdown_signal: str = ""

    @classmethod
    def _from_yaml(cls, data: Any) -> ProcessConfig:
        data = _mapping(data, "process")
        hooks = data.get("hooks")
        limits = data.get("limits")
        unsafe = data.get("unsafe")
        return cls(
            name=_str(data.get("name"), "name"),
            executable=_str(data.get("executable"), "executable"),
            args=_str_list(data.get("args"), "args"),
            env=_str_map(data.get("env"), "env"),
            additional_volumes=[
                Volume._from_yaml(v)
                for v in _list(data.get("additional_volumes"), "additional_volumes")
            ],
            capabilities=_str_list(data.get("capabilities"), "capabilities"),
            ephemeral_disk=_bool(data.get("ephemeral_disk"), "ephemeral_disk"),
            hooks=None if hooks is None else Hooks._from_yaml(hooks),
            limits=None if limits is None else Limits._from_yaml(limits),
            persistent_disk=_bool(data.get("persistent_disk"), "persistent_disk"),
            workdir=_str(data.get("workdir"), "workdir"),
            unsafe=None if unsafe is None else Unsafe._from_yaml(unsafe),
            shutdown_signal=_str(data.get("shutdown_signal"), "shutdown_signal"),
        )

    def validate(self, bosh_env: Env, default_volumes: list[str]) -> None:
        """Raise ConfigError if the process configuration is invalid."""
        if not self.name:
            raise ConfigError("invalid config: name")
        if not self.executable:
            raise ConfigError("invalid config: executable")

        root = bosh_env.root().external()
        for volume in self.additional_volumes:
            cleaned = _clean(volume.path)
            if cleaned != volume.path:
                raise ConfigError(
                    f"volume path must be canonical, expected {cleaned} but got {volume.path}"
                )
            if cleaned in default_volumes:
                raise ConfigError(
                    f"invalid volume path: {volume.path} cannot conflict with "
                    "default job data or store directories"
                )
            if not _path_is_in(cleaned, root):
                raise ConfigError(
                    f"invalid volume path: {volume.path} must be within {root}"
                )

        if self.shutdown_signal not in ("", "TERM", "INT"):
            raise ConfigError(
                "shutdown signal should either be 'TERM' or 'INT' (or left unspecified), "
                f"but got '{self.shutdown_signal}'"
            )

    def parse_shutdown_signal(self) -> ShutdownSignal:
        """The signal used to stop the process; TERM unless INT is configured."""
        if self.shutdown_signal == "INT":
            return ShutdownSignal.INT
        return ShutdownSignal.TERM

    def add_volumes(
        self, volumes: list[str], bosh_env: Env, default_volumes: list[str]
    ) -> None:
        """Add volumes given as ``<path>[:<options>]`` and revalidate."""
        for definition in volumes:
            fields = definition.split(":")
            if len(fields) > 2:
                raise ConfigError(
                    "invalid volume definition (format: <path>[:<options>]): "
                    f"{definition}"
                )
            flags = {}
            if len(fields) == 2:
                for option in fields[1].split(","):
                    if option not in _VOLUME_OPTIONS:
                        raise ConfigError(f"invalid volume option: {option}")
                    flags[option] = True
            self.additional_volumes.append(Volume(path=fields[0], **flags))

        self.validate(bosh_env, default_volumes)

    def add_env_vars(
        self, env: list[str], bosh_env: Env, default_volumes: list[str]
    ) -> None:
        """Add ``KEY=VALUE`` environment variables (later ones win) and revalidate."""
        if self.env is None:
            self.env = {}
        for definition in env:
            key, sep, value = definition.partition("=")
            if not sep:
                raise ConfigError(
                    "invalid environment variable definition "
                    f"(format should be KEY=value): {definition!r}"
                )
            self.env[key] = value

        self.validate(bosh_env, default_volumes)


@dataclass
class JobConfig:
    """Configuration of all processes in a job."""

    processes: list[ProcessConfig] = field(default_factory=list)

    @classmethod
    def _from_yaml(cls, data: Any) -> JobConfig:
        data = _mapping(data, "job configuration")
        return cls(
            processes=[
                ProcessConfig._from_yaml(p)
                for p in _list(data.get("processes"), "processes")
            ]
        )

    def validate(self, bosh_env: Env, default_volumes: list[str]) -> None:
        """Raise ConfigError if any process configuration is invalid."""
        for process in self.processes:
            process.validate(bosh_env, default_volumes)


def parse_job_config(config_path: str) -> JobConfig:
    """Read and parse a job configuration file without validating it.

    Raises OSError if the file cannot be read and ConfigError if it is
    not a well-formed job configuration.
    """
    with open(config_path, encoding="utf-8") as handle:
        text = handle.read()
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid yaml in {config_path}: {exc}") from exc
    return JobConfig._from_yaml(data)