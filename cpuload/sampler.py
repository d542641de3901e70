"""
Sampling loop.

    PRIMING  -> first CPU / network read, then one interval wait
    SAMPLING -> read, diff against previous, emit, wait, repeat
    STOPPED  -> stop event set or sample limit reached

The sampler owns the previous snapshots; nothing else touches them.
"""
import logging
import socket
import threading
import time
from datetime import datetime
from enum import Enum

from cpuload import StartupError
from cpuload.config import SamplerConfig
from cpuload.counters import (
    read_cpu_snapshot,
    read_disk_space,
    read_network_counters,
)
from cpuload.rates import cpu_loads, network_rate, to_megabits
from cpuload.report import SampleReport

logger = logging.getLogger(__name__)


class SamplerState(Enum):
    PRIMING = "priming"
    SAMPLING = "sampling"
    STOPPED = "stopped"


class Sampler:

    def __init__(self, cpu_count, interface, config: SamplerConfig, sinks=(),
                 stop_event=None, clock=time.monotonic, hostname=None):
        self.cpu_count = cpu_count
        self.interface = interface
        self.config = config
        self.sinks = list(sinks)
        self.stop_event = stop_event or threading.Event()
        self.clock = clock
        self.hostname = hostname or socket.gethostname()

        self.state = SamplerState.PRIMING
        self.samples_emitted = 0

        self._prev_cpu = None
        self._prev_net = None
        self._prev_net_time = None

    def stop(self):
        self.stop_event.set()

    def prime(self):
        """Take the first snapshots. A failed CPU read here is fatal."""
        cpu = read_cpu_snapshot(self.cpu_count, self.config.stat_path)
        if not cpu.ok:
            raise StartupError(f"Initial CPU read failed: {cpu.error}")
        self._prev_cpu = cpu.value

        net = read_network_counters(self.interface, self.config.net_dev_path)
        if net.ok:
            self._prev_net = net.value
            self._prev_net_time = self.clock()
        else:
            logger.warning(f"Initial network read failed: {net.error}")

        self.state = SamplerState.SAMPLING

    def sample_once(self):
        """Read all counters once and diff them against the previous snapshots."""
        report = SampleReport(
            timestamp=datetime.now().isoformat(timespec="seconds"),
            host=self.hostname,
            interface=self.interface,
        )

        cpu = read_cpu_snapshot(self.cpu_count, self.config.stat_path)
        if cpu.ok:
            report.cpu_loads = cpu_loads(self._prev_cpu, cpu.value)
            self._prev_cpu = cpu.value
        else:
            self._warn(report, f"CPU sample skipped: {cpu.error}")

        disk = read_disk_space(self.config.disk_path)
        if disk.ok:
            report.disk = disk.value
        else:
            self._warn(report, f"Disk sample skipped: {disk.error}")

        net = read_network_counters(self.interface, self.config.net_dev_path)
        now = self.clock()
        if net.ok:
            if self._prev_net is not None and now > self._prev_net_time:
                rx, tx = network_rate(self._prev_net, net.value, now - self._prev_net_time)
                report.rx_mbps = to_megabits(rx)
                report.tx_mbps = to_megabits(tx)
            self._prev_net = net.value
            self._prev_net_time = now
        else:
            self._warn(report, f"Network sample skipped: {net.error}")

        return report

    def run(self):
        """Sample until stopped or max_samples reached. Returns reports emitted."""
        if self.state is SamplerState.PRIMING:
            self.prime()

        max_samples = self.config.max_samples
        while not self._wait():
            report = self.sample_once()
            self._emit(report)
            self.samples_emitted += 1
            if max_samples is not None and self.samples_emitted >= max_samples:
                break

        self.state = SamplerState.STOPPED
        return self.samples_emitted

    def _wait(self):
        # True when cancelled
        if self.stop_event.is_set():
            return True
        return self.stop_event.wait(self.config.interval)

    def _emit(self, report):
        for sink in self.sinks:
            sink(report)

    @staticmethod
    def _warn(report, message):
        logger.warning(message)
        report.warnings.append(message)
