import json
import sys
from dataclasses import dataclass, field
from typing import List, Optional

from cpuload.counters import DiskSpace
from cpuload.rates import to_gigabytes


@dataclass
class SampleReport:
    """One sampling interval's worth of metrics."""
    timestamp: str
    host: str
    interface: str
    # index 0 is the aggregate; empty when the cpu read failed
    cpu_loads: List[float] = field(default_factory=list)
    disk: Optional[DiskSpace] = None
    rx_mbps: Optional[float] = None
    tx_mbps: Optional[float] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def total_cpu_load(self):
        return self.cpu_loads[0] if self.cpu_loads else None

    @property
    def per_cpu_loads(self):
        return self.cpu_loads[1:]

    def to_dict(self):
        return {
            "timestamp": self.timestamp,
            "host": self.host,
            "cpu_percent": self.total_cpu_load,
            "per_cpu_percent": self.per_cpu_loads,
            "disk_total_bytes": self.disk.total_bytes if self.disk else None,
            "disk_free_bytes": self.disk.free_bytes if self.disk else None,
            "interface": self.interface,
            "rx_mbps": self.rx_mbps,
            "tx_mbps": self.tx_mbps,
            "warnings": list(self.warnings),
        }


def render_text(report):
    """Human-readable block, terminated by a blank separator line."""
    lines = []
    if report.cpu_loads:
        lines.append(f"Total CPU Load: {report.total_cpu_load:.2f}%")
        for i, load in enumerate(report.per_cpu_loads):
            lines.append(f"CPU {i} Load: {load:.2f}%")
    if report.disk is not None:
        lines.append(
            f"Total Disk Space: {to_gigabytes(report.disk.total_bytes):.2f} GB | "
            f"Free Disk Space: {to_gigabytes(report.disk.free_bytes):.2f} GB"
        )
    if report.rx_mbps is not None and report.tx_mbps is not None:
        lines.append(
            f"Network Interface: {report.interface} | "
            f"RX Speed: {report.rx_mbps:.2f} Mb/s | "
            f"TX Speed: {report.tx_mbps:.2f} Mb/s"
        )
    lines.append("")
    return "\n".join(lines) + "\n"


def render_json(report):
    return json.dumps(report.to_dict()) + "\n"


RENDERERS = {
    "text": render_text,
    "json": render_json,
}


def make_printer(output_format="text", stream=None):
    """Sink that renders each report and writes it to stream (stdout by default)."""
    render = RENDERERS[output_format]

    def _print(report):
        print(render(report), end="", file=stream or sys.stdout, flush=True)

    return _print
