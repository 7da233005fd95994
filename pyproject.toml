[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bpm"
version = "1.0.0"
description = "BOSH job paths, job configuration, host-wide locks and log tailing"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["bosh", "process-manager", "jobs", "flock", "logs"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
bpm = "bpm.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["bpm"]

[tool.pytest.ini_options]
addopts = "-ra"
