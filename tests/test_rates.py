import math
import random

import pytest

from cpuload.counters import CpuTimes, NetworkCounters
from cpuload.rates import (
    cpu_load_percent,
    cpu_loads,
    network_rate,
    to_gigabytes,
    to_megabits,
)


def times(user=0, nice=0, system=0, idle=0, iowait=0, irq=0, softirq=0):
    return CpuTimes(user, nice, system, idle, iowait, irq, softirq)


class TestCpuLoadPercent:

    def test_half_busy(self):
        # 20 ticks elapsed, 10 of them idle
        prev = times(user=100, system=50, idle=850)
        curr = times(user=110, system=50, idle=860)
        assert cpu_load_percent(prev, curr) == pytest.approx(50.0)

    def test_user_system_and_idle_all_advance(self):
        # 30 ticks elapsed, 10 of them idle
        prev = times(user=100, system=50, idle=850)
        curr = times(user=110, system=60, idle=860)
        assert cpu_load_percent(prev, curr) == pytest.approx(200 / 3)

    def test_fully_idle(self):
        assert cpu_load_percent(times(idle=10), times(idle=110)) == 0.0

    def test_fully_busy(self):
        assert cpu_load_percent(times(user=10), times(user=60, irq=40)) == 100.0

    def test_zero_tick_diff_falls_back_to_zero(self):
        snap = times(user=5, system=3, idle=90)
        result = cpu_load_percent(snap, snap)
        assert result == 0.0
        assert not math.isnan(result)

    def test_counters_going_backwards_fall_back_to_zero(self):
        assert cpu_load_percent(times(user=500, idle=500), times(user=10, idle=10)) == 0.0

    def test_result_always_within_bounds(self):
        rng = random.Random(1234)
        for _ in range(500):
            prev = times(*(rng.randint(0, 10_000) for _ in range(7)))
            curr = CpuTimes(*(v + rng.randint(0, 500) for v in (
                prev.user, prev.nice, prev.system, prev.idle,
                prev.iowait, prev.irq, prev.softirq)))
            if curr.total - prev.total > 0:
                assert 0.0 <= cpu_load_percent(prev, curr) <= 100.0

    def test_cpu_loads_pairs_entries(self):
        prev = [times(idle=0), times(idle=0)]
        curr = [times(user=10, idle=10), times(idle=10)]
        assert cpu_loads(prev, curr) == [50.0, 0.0]


class TestNetworkRate:

    def test_bytes_per_second(self):
        rx, tx = network_rate(NetworkCounters(1000, 500), NetworkCounters(3000, 1500), 2.0)
        assert rx == 1000.0
        assert tx == 500.0

    def test_doubling_elapsed_halves_rate(self):
        prev, curr = NetworkCounters(0, 0), NetworkCounters(4096, 2048)
        rx1, tx1 = network_rate(prev, curr, 1.5)
        rx2, tx2 = network_rate(prev, curr, 3.0)
        assert rx2 == pytest.approx(rx1 / 2)
        assert tx2 == pytest.approx(tx1 / 2)

    def test_rollover_clamps_to_zero(self):
        rx, tx = network_rate(NetworkCounters(9000, 100), NetworkCounters(10, 200), 1.0)
        assert rx == 0.0
        assert tx == 100.0

    @pytest.mark.parametrize("elapsed", [0, -1.0])
    def test_non_positive_elapsed_rejected(self, elapsed):
        with pytest.raises(ValueError):
            network_rate(NetworkCounters(0, 0), NetworkCounters(1, 1), elapsed)


class TestUnits:

    def test_megabits_same_divisor(self):
        # 131072 bytes/s == 1 Mb/s (binary megabit)
        assert to_megabits(131072) == 1.0

    def test_gigabytes(self):
        assert to_gigabytes(3 * 1024 ** 3) == 3.0
