"""
Sampler configuration.

Defaults live here as module constants; environment variables override the
defaults and command-line flags override both (see cli.py).
"""
import logging
import math
import os
import threading
from dataclasses import dataclass
from typing import Optional

from cpuload import ConfigError
from cpuload.counters import PROC_CPUINFO, PROC_NET_DEV, PROC_STAT

DEFAULT_INTERVAL = 1.0
DEFAULT_DISK_PATH = "/"
OUTPUT_FORMATS = ("text", "json")

ENV_INTERVAL = "CPULOAD_INTERVAL"
ENV_INTERFACE = "CPULOAD_INTERFACE"
ENV_POST_URL = "CPULOAD_POST_URL"
ENV_LOG_LEVEL = "CPULOAD_LOG_LEVEL"


@dataclass
class SamplerConfig:
    interval: float = DEFAULT_INTERVAL
    interface: Optional[str] = None
    output_format: str = "text"
    max_samples: Optional[int] = None
    disk_path: str = DEFAULT_DISK_PATH
    post_url: Optional[str] = None
    log_level: str = "INFO"

    stat_path: str = PROC_STAT
    cpuinfo_path: str = PROC_CPUINFO
    net_dev_path: str = PROC_NET_DEV

    def validate(self):
        if not math.isfinite(self.interval) or self.interval <= 0:
            raise ConfigError(f"interval must be a positive number, got {self.interval}")
        if self.interval > threading.TIMEOUT_MAX:
            raise ConfigError(f"interval too large, got {self.interval}")
        if self.output_format not in OUTPUT_FORMATS:
            raise ConfigError(
                f"unknown output format {self.output_format!r}, "
                f"expected one of {', '.join(OUTPUT_FORMATS)}"
            )
        if self.max_samples is not None and self.max_samples < 1:
            raise ConfigError(f"count must be at least 1, got {self.max_samples}")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ConfigError(f"unknown log level {self.log_level!r}")
        return self


def env_defaults(environ=None):
    """Config overrides taken from CPULOAD_* environment variables."""
    environ = os.environ if environ is None else environ
    overrides = {}

    if environ.get(ENV_INTERVAL):
        try:
            overrides["interval"] = float(environ[ENV_INTERVAL])
        except ValueError:
            raise ConfigError(f"{ENV_INTERVAL} is not a number: {environ[ENV_INTERVAL]!r}")
    if environ.get(ENV_INTERFACE):
        overrides["interface"] = environ[ENV_INTERFACE]
    if environ.get(ENV_POST_URL):
        overrides["post_url"] = environ[ENV_POST_URL]
    if environ.get(ENV_LOG_LEVEL):
        overrides["log_level"] = environ[ENV_LOG_LEVEL]

    return overrides
