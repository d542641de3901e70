"""Periodic host-metrics sampler: CPU load, root disk space, network throughput."""

__version__ = "0.1.0"


class CpuloadError(Exception):
    """Base error for cpuload."""


class ConfigError(CpuloadError):
    """Invalid configuration value."""


class StartupError(CpuloadError):
    """Sampling cannot start (no CPUs, no interface, unreadable counters)."""
