"""Turn pairs of counter snapshots into loads and rates."""

BITS_PER_BYTE = 8
BYTES_PER_MEGABIT_UNIT = 1024 * 1024
BYTES_PER_GB = 1024 ** 3


def cpu_load_percent(prev, curr):
    """
    Busy share of the ticks accumulated between prev and curr, in percent.

    Returns 0.0 when no ticks were accumulated (or the counters went
    backwards), so the result is always within [0, 100].
    """
    total_diff = curr.total - prev.total
    if total_diff <= 0:
        return 0.0
    idle_diff = max(curr.idle - prev.idle, 0)
    busy = min(max(total_diff - idle_diff, 0), total_diff)
    return busy / total_diff * 100


def cpu_loads(prev, curr):
    """Per-entry loads; index 0 is the aggregate CPU."""
    return [cpu_load_percent(p, c) for p, c in zip(prev, curr)]


def network_rate(prev, curr, elapsed_seconds):
    """(rx, tx) in bytes per second. Counter rollover or reset counts as zero traffic."""
    if elapsed_seconds <= 0:
        raise ValueError(f"elapsed_seconds must be positive, got {elapsed_seconds}")
    rx_diff = max(curr.rx_bytes - prev.rx_bytes, 0)
    tx_diff = max(curr.tx_bytes - prev.tx_bytes, 0)
    return rx_diff / elapsed_seconds, tx_diff / elapsed_seconds


def to_megabits(bytes_per_second):
    # same divisor for rx and tx
    return bytes_per_second * BITS_PER_BYTE / BYTES_PER_MEGABIT_UNIT


def to_gigabytes(n_bytes):
    return n_bytes / BYTES_PER_GB
