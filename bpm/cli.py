"""Command-line entry point for bpm."""

from __future__ import annotations

import argparse
import contextlib
import os
import signal
import subprocess
import sys
from collections.abc import Iterator, Sequence

from bpm import exitstatus
from bpm.bosh import Env
from bpm.bpm_config import BPMConfig

__all__ = ["VERSION", "CommandError", "files_to_tail", "build_tail_args", "main"]

VERSION = ""
DEFAULT_LINES = 25

_FORWARDED_SIGNALS = tuple(
    sig
    for sig in (
        getattr(signal, "SIGINT", None),
        getattr(signal, "SIGTERM", None),
        getattr(signal, "SIGHUP", None),
        getattr(signal, "SIGQUIT", None),
        getattr(signal, "SIGUSR1", None),
        getattr(signal, "SIGUSR2", None),
        getattr(signal, "SIGWINCH", None),
    )
    if sig is not None
)


class CommandError(Exception):
    """A command failed; the message is shown to the user."""


class _UsageError(CommandError):
    """The command line could not be parsed."""


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise _UsageError(message)


def files_to_tail(bpm_config: BPMConfig, err_logs: bool, all_logs: bool) -> list[str]:
    """External paths of the log files to show for the given selection."""
    files = []
    if not err_logs or all_logs:
        files.append(bpm_config.stdout().external())
    if err_logs or all_logs:
        files.append(bpm_config.stderr().external())
    return files


def build_tail_args(
    files: Sequence[str], follow: bool, quiet: bool, lines: int
) -> list[str]:
    """Arguments passed to ``tail`` to show ``files``."""
    args = []
    if follow:
        args.append("-f")
    if quiet:
        args.append("-q")
    args.append(f"-n {lines}")
    args.extend(files)
    return args


def _version_string() -> str:
    return VERSION or "[DEV BUILD]"


def _bosh_env() -> Env:
    return Env(os.environ.get("BPM_BOSH_ROOT", ""))


def _config_for(job: str | None, process: str) -> BPMConfig:
    if not job:
        raise CommandError("must specify a job")
    return BPMConfig(_bosh_env(), job, process or job)


@contextlib.contextmanager
def _forward_signals(child: subprocess.Popen) -> Iterator[None]:
    """Forward signals received by this process to ``child`` while active."""

    def forward(signum: int, _frame: object) -> None:
        with contextlib.suppress(ProcessLookupError):
            child.send_signal(signum)

    previous = {}
    for sig in _FORWARDED_SIGNALS:
        with contextlib.suppress(ValueError, OSError):
            previous[sig] = signal.signal(sig, forward)
    try:
        yield
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


def _describe_exit(returncode: int) -> str:
    if returncode < 0:
        try:
            name = signal.Signals(-returncode).name
        except ValueError:
            name = str(-returncode)
        return f"signal: {name}"
    return f"exit status {returncode}"


def _run_logs(args: argparse.Namespace) -> None:
    cfg = _config_for(args.job, args.process)
    files = files_to_tail(cfg, args.err, args.all)
    if any(not os.path.exists(path) for path in files):
        raise CommandError("logs not found")

    sys.stdout.flush()
    sys.stderr.flush()
    child = subprocess.Popen(
        ["tail", *build_tail_args(files, args.follow, args.quiet, args.lines)]
    )
    with _forward_signals(child):
        returncode = child.wait()

    if returncode not in (0, -signal.SIGINT):
        raise CommandError(_describe_exit(returncode))
    print(file=sys.stdout)


def _build_parser() -> _Parser:
    parser = _Parser(
        prog="bpm",
        description="A bosh process manager for starting and stopping release jobs",
    )
    parser.add_argument("--version", action="store_true", help="print BPM version")
    commands = parser.add_subparsers(dest="command", parser_class=_Parser)

    version = commands.add_parser("version", help="prints the BPM version")
    version.add_argument("extra", nargs="*", help=argparse.SUPPRESS)

    logs = commands.add_parser("logs", help="streams the logs for a given job")
    logs.add_argument("job", nargs="?", help="job name")
    logs.add_argument("-a", "--all", action="store_true", help="show both stdout and stderr")
    logs.add_argument("-e", "--err", action="store_true", help="show stderr")
    logs.add_argument("-f", "--follow", action="store_true", help="show and follow specified logs")
    logs.add_argument("-n", "--lines", type=int, default=DEFAULT_LINES, help="number of lines to show")
    logs.add_argument("-p", "--process", default="", help="optional process name")
    logs.add_argument("-q", "--quiet", action="store_true", help="suppress filename headers")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run bpm with ``argv`` and return the process exit status."""
    parser = _build_parser()
    try:
        args = parser.parse_args(list(sys.argv[1:] if argv is None else argv))

        if args.version:
            print(_version_string(), file=sys.stdout)
            return 0

        if args.command == "version":
            if args.extra:
                print(parser.format_usage(), end="", file=sys.stderr)
                return 1
            print(_version_string(), file=sys.stdout)
            return 0

        if args.command == "logs":
            _run_logs(args)
            return 0

        raise CommandError("Exit code 1")
    except Exception as err:  # noqa: BLE001 - every failure is reported to the user
        print(f"Error: {err}", file=sys.stderr)
        return exitstatus.from_error(err)


if __name__ == "__main__":
    sys.exit(main())