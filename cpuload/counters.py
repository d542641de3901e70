"""
Raw counter readers.

Each reader returns a ReadResult instead of raising, so the sampler can decide
whether a failure is fatal (startup) or just a skipped section (steady state).
"""
import os
from dataclasses import dataclass
from typing import List, Optional

PROC_STAT = "/proc/stat"
PROC_CPUINFO = "/proc/cpuinfo"
PROC_NET_DEV = "/proc/net/dev"

CPU_FIELDS = ("user", "nice", "system", "idle", "iowait", "irq", "softirq")

# /proc/net/dev columns after "<iface>:"
RX_BYTES_COL = 0
TX_BYTES_COL = 8


@dataclass(frozen=True)
class ReadResult:
    """Outcome of one counter read: a value, or an error message."""
    value: object = None
    error: Optional[str] = None

    @property
    def ok(self):
        return self.error is None

    @classmethod
    def success(cls, value):
        return cls(value=value)

    @classmethod
    def failure(cls, error):
        return cls(error=str(error))


@dataclass(frozen=True)
class CpuTimes:
    user: int = 0
    nice: int = 0
    system: int = 0
    idle: int = 0
    iowait: int = 0
    irq: int = 0
    softirq: int = 0

    @property
    def total(self):
        return (self.user + self.nice + self.system + self.idle
                + self.iowait + self.irq + self.softirq)


# index 0 is the aggregate "cpu" line, 1..N are cpu0..cpuN-1
CpuSnapshot = List[CpuTimes]


@dataclass(frozen=True)
class DiskSpace:
    total_bytes: int
    free_bytes: int


@dataclass(frozen=True)
class NetworkCounters:
    rx_bytes: int
    tx_bytes: int


def _parse_cpu_line(line):
    fields = line.split()
    if len(fields) < len(CPU_FIELDS) + 1:
        return None
    try:
        values = [int(v) for v in fields[1:len(CPU_FIELDS) + 1]]
    except ValueError:
        return None
    if any(v < 0 for v in values):
        return None
    return CpuTimes(*values)


def read_cpu_snapshot(cpu_count, path=PROC_STAT):
    """Read the aggregate line plus one line per CPU from /proc/stat."""
    wanted = cpu_count + 1
    snapshot = []
    try:
        with open(path, "r") as f:
            for line in f:
                if len(snapshot) >= wanted:
                    break
                if not line.startswith("cpu"):
                    continue
                times = _parse_cpu_line(line)
                if times is not None:
                    snapshot.append(times)
    except OSError as e:
        return ReadResult.failure(f"cannot read {path}: {e}")

    if len(snapshot) < wanted:
        return ReadResult.failure(
            f"{path}: expected {wanted} cpu lines, found {len(snapshot)}"
        )
    return ReadResult.success(snapshot)


def read_disk_space(path="/"):
    """Total and free bytes of the filesystem mounted at path."""
    try:
        st = os.statvfs(path)
    except OSError as e:
        return ReadResult.failure(f"statvfs({path}) failed: {e}")
    return ReadResult.success(DiskSpace(
        total_bytes=st.f_frsize * st.f_blocks,
        free_bytes=st.f_frsize * st.f_bfree,
    ))


def read_network_counters(interface, path=PROC_NET_DEV):
    """
    Cumulative rx/tx byte counters for one interface from /proc/net/dev.

    A missing interface is a failure, not zero counters: callers keep their
    previous values.
    """
    try:
        with open(path, "r") as f:
            for line in f:
                if ":" not in line:
                    continue  # header
                name, data = line.split(":", 1)
                if name.strip() != interface:
                    continue
                cols = data.split()
                try:
                    return ReadResult.success(NetworkCounters(
                        rx_bytes=int(cols[RX_BYTES_COL]),
                        tx_bytes=int(cols[TX_BYTES_COL]),
                    ))
                except (IndexError, ValueError):
                    return ReadResult.failure(f"{path}: malformed line for {interface}")
    except OSError as e:
        return ReadResult.failure(f"cannot read {path}: {e}")

    return ReadResult.failure(f"interface {interface!r} not found in {path}")


def get_cpu_count(path=PROC_CPUINFO):
    """Number of 'processor' entries in /proc/cpuinfo."""
    try:
        with open(path, "r") as f:
            count = sum(1 for line in f if line.startswith("processor"))
    except OSError as e:
        return ReadResult.failure(f"cannot read {path}: {e}")
    return ReadResult.success(count)
