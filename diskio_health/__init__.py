"""Disk-I/O health monitor — diskstats polling, smoothing and health verdicts."""

__version__ = "0.1.0"
