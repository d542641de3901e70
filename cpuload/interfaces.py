import logging
import socket

import psutil

logger = logging.getLogger(__name__)


def list_interfaces():
    try:
        return list(psutil.net_if_addrs())
    except OSError as e:
        logger.error(f"Failed to enumerate network interfaces: {e}")
        return []


def first_ipv4_interface():
    """Name of the first interface bound to an IPv4 address, or None."""
    try:
        addrs = psutil.net_if_addrs()
    except OSError as e:
        logger.error(f"Failed to enumerate network interfaces: {e}")
        return None

    for name, snics in addrs.items():
        if any(snic.family == socket.AF_INET for snic in snics):
            return name
    return None
