# bpm

Tools for working with BOSH release jobs. The package works out where a job
keeps its data, logs, configuration and runtime files inside a BOSH root,
reads and validates a job's `bpm.yml`, encodes job and process names into
container-safe IDs, and takes host-wide advisory locks on jobs and volumes.
A small command line shows the version and tails a job's logs.

## Installation

```
pip install .
```

## Command line

```
bpm version
bpm --version
bpm logs <job-name> [-p PROCESS] [-e | -a] [-f] [-q] [-n LINES]
```

`bpm version` and `bpm --version` print the version (`[DEV BUILD]` when
none is set).

`bpm logs` runs `tail` on a job process's standard output log. The process
name defaults to the job name. Use `-e` to tail standard error instead, `-a`
for both, `-f` to follow, `-q` to leave out the file name headers and `-n`
to set the number of lines (25 by default). Signals received while `tail`
runs are passed on to it. If a selected log file does not exist the command
fails with `logs not found`.

Errors are printed as `Error: <message>` on standard error and the command
exits with status 1 (or the status carried by a
`bpm.exitstatus.ExitStatusError`).

The BOSH root defaults to `/var/vcap`. Set `BPM_BOSH_ROOT` to use a
different one.

## Library

```python
from bpm.bosh import Env
from bpm.bpm_config import BPMConfig
from bpm import jobid

env = Env("")
cfg = BPMConfig(env, "web", "worker")

cfg.stdout().external()           # /var/vcap/sys/log/web/worker.stdout.log
cfg.container_id()                # bpm-web.2eworker
jobid.decode(cfg.container_id())  # "web.worker"

job = cfg.parse_job_config()      # reads and validates jobs/web/config/bpm.yml
```

- `bpm.bosh`: `Env` gives the job's data, store, job, run and log
  directories and the package directories; `Env.job_names()` lists the jobs
  present. A `Path` has two forms: `external()`, the path on the host, and
  `internal()`, the path under `/var/vcap` as seen inside the job.
  `Path.join()` returns a new path. Turning a `Path` straight into a string
  raises `TypeError`, so that the choice is always made on purpose.
- `bpm.job_config`: `parse_job_config()` reads a `bpm.yml` into a
  `JobConfig` of `ProcessConfig` entries. `validate()` checks names,
  executables, that additional volumes are canonical, lie inside the BOSH
  root and do not clash with the default volumes, and that the shutdown
  signal is `TERM` or `INT`. `add_volumes()` takes `<path>[:<options>]`
  definitions (`writable`, `mount_only`, `allow_executions`, `shared`) and
  `add_env_vars()` takes `KEY=VALUE` definitions. Problems raise
  `ConfigError`.
- `bpm.bpm_config`: `BPMConfig` for one process of one job, plus
  `runc_path()`, `bundles_root()`, `runc_root()` and `locks_path()`.
- `bpm.jobid`: `encode()` and `decode()`; bad IDs raise
  `InvalidJobIDError`.
- `bpm.cgroups`: `subsystem_grouping()` reports how a cgroup subsystem is
  grouped for the current process, from `/proc/self/cgroup`.
- `bpm.models`: `ProcessState` and `Process`.

Locks are taken through `bpm.hostlock.Handle`; the lock directory must
exist:

```python
from bpm.bpm_config import locks_path
from bpm.hostlock import Handle

locks = Handle(locks_path(env))
held = locks.lock_job("web", "worker")
try:
    ...
finally:
    held.unlock()
```

`Handle.lock_volume(path)` works the same way for a volume. Both block until
the lock is free and return a `bpm.flock.Flock`; unlocking a lock that is
not held raises `RuntimeError`.

## What it does not do

The package does not start, stop, run, list or inspect job processes, and
has no `start`, `stop`, `run`, `list`, `pid`, `shell` or `trace` commands.
It does not create containers or mount cgroup filesystems; the cgroup
support only reads how subsystems are grouped.