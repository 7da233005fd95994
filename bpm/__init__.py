"""BOSH job paths, job configuration, job IDs, host-wide locks and log tailing."""

__version__ = "1.0.0"