import logging

import pytest

from cpuload.config import SamplerConfig
from cpuload.counters import DiskSpace
from cpuload.report import SampleReport

NET_DEV_HEADER = (
    "Inter-|   Receive                                                |  Transmit\n"
    " face |bytes    packets errs drop fifo frame compressed multicast"
    "|bytes    packets errs drop fifo colls carrier compressed\n"
)


def stat_text(rows):
    """/proc/stat content; rows[0] is the aggregate, rows[1:] are cpu0..cpuN-1."""
    lines = []
    for i, row in enumerate(rows):
        label = "cpu " if i == 0 else f"cpu{i - 1}"
        lines.append(" ".join([label] + [str(v) for v in row] + ["0", "0", "0"]))
    lines += ["intr 123456 0 0", "ctxt 98765", "btime 1700000000", "processes 4242"]
    return "\n".join(lines) + "\n"


def net_dev_text(counters):
    """/proc/net/dev content from {iface: (rx_bytes, tx_bytes)}."""
    lines = [NET_DEV_HEADER]
    for name, (rx, tx) in counters.items():
        lines.append(f"{name:>6}: {rx} 10 0 0 0 0 0 0 {tx} 20 0 0 0 0 0 0\n")
    return "".join(lines)


def cpuinfo_text(count):
    blocks = [f"processor\t: {i}\nvendor_id\t: GenuineIntel\n" for i in range(count)]
    return "\n".join(blocks)


class FakeClock:

    def __init__(self, start=100.0, step=1.0):
        self.now = start
        self.step = step

    def __call__(self):
        value = self.now
        self.now += self.step
        return value


@pytest.fixture
def proc(tmp_path):
    """Writable fake /proc files plus a config pointing at them."""
    class Proc:
        stat = tmp_path / "stat"
        cpuinfo = tmp_path / "cpuinfo"
        net_dev = tmp_path / "net_dev"

        def write_stat(self, rows):
            self.stat.write_text(stat_text(rows))

        def write_net(self, counters):
            self.net_dev.write_text(net_dev_text(counters))

        def write_cpuinfo(self, count):
            self.cpuinfo.write_text(cpuinfo_text(count))

        def config(self, **kwargs):
            kwargs.setdefault("interval", 0.001)
            return SamplerConfig(
                stat_path=str(self.stat),
                cpuinfo_path=str(self.cpuinfo),
                net_dev_path=str(self.net_dev),
                **kwargs,
            )

    return Proc()


@pytest.fixture(autouse=True)
def reset_cpuload_logger():
    yield
    logger = logging.getLogger("cpuload")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def fake_clock():
    return FakeClock(start=100.0, step=1.0)


@pytest.fixture
def make_report():
    """Factory for a fully populated SampleReport; keyword args override fields."""
    def _make(**kwargs):
        values = dict(
            timestamp="2026-01-02T03:04:05",
            host="box",
            interface="eth0",
            cpu_loads=[25.0, 10.0, 40.0],
            disk=DiskSpace(total_bytes=100 * 1024 ** 3, free_bytes=40 * 1024 ** 3),
            rx_mbps=1.5,
            tx_mbps=0.25,
        )
        values.update(kwargs)
        return SampleReport(**values)
    return _make
