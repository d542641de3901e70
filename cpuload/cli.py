"""
cpuload command line.

usage: cpuload [--interval S] [--interface NAME] [--format text|json]
               [--count N] [--disk-path PATH] [--post-url URL]
               [--log-level LEVEL] [--log-file PATH]

Exits 1 when sampling cannot start, 0 after Ctrl+C / SIGTERM or --count.
"""
import argparse
import logging
import os
import signal
import sys
import threading
from pathlib import Path

from cpuload import CpuloadError, StartupError, __version__
from cpuload.client import ReportPoster
from cpuload.config import OUTPUT_FORMATS, SamplerConfig, env_defaults
from cpuload.counters import get_cpu_count
from cpuload.interfaces import first_ipv4_interface, list_interfaces
from cpuload.log_config import setup_logger
from cpuload.report import make_printer
from cpuload.sampler import Sampler

logger = logging.getLogger("cpuload")


def build_parser():
    ap = argparse.ArgumentParser(
        prog="cpuload",
        description="Report CPU load, root disk space and network throughput once per interval.",
    )
    ap.add_argument("-i", "--interval", type=float,
                    help="Sampling interval in seconds (default: 1.0)")
    ap.add_argument("--interface",
                    help="Network interface to report (default: first with an IPv4 address)")
    ap.add_argument("-f", "--format", dest="output_format", choices=OUTPUT_FORMATS,
                    help="Output format (default: text)")
    ap.add_argument("-n", "--count", dest="max_samples", type=int,
                    help="Stop after N reports (default: run until interrupted)")
    ap.add_argument("--disk-path",
                    help="Mount point to report disk space for (default: /)")
    ap.add_argument("--post-url",
                    help="Also POST every report as JSON to this URL")
    ap.add_argument("--log-level", help="Logging level (default: INFO)")
    ap.add_argument("--log-file", type=Path, help="Also write logs to this file")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def load_config(args, environ=None):
    """Defaults, then CPULOAD_* environment, then command-line flags."""
    values = env_defaults(environ)
    for key in ("interval", "interface", "output_format", "max_samples",
                "disk_path", "post_url", "log_level"):
        value = getattr(args, key, None)
        if value is not None:
            values[key] = value
    return SamplerConfig(**values).validate()


def resolve_startup(config):
    """Returns (cpu_count, interface) or raises StartupError."""
    count = get_cpu_count(config.cpuinfo_path)
    if not count.ok:
        raise StartupError(f"Error getting CPU count: {count.error}")
    if count.value < 1:
        raise StartupError(f"Error getting CPU count: no processors listed in {config.cpuinfo_path}")

    if config.interface:
        interface = config.interface
        if interface not in list_interfaces():
            logger.warning(f"Interface {interface!r} is not currently listed by the system")
    else:
        interface = first_ipv4_interface()
        if interface is None:
            raise StartupError("No network interface with an IPv4 address found")

    return count.value, interface


def install_signal_handlers(stop_event):
    """Set stop_event on SIGINT/SIGTERM. Returns the previous handlers."""
    def handle(sig, frame):
        logger.info("Stopping...")
        stop_event.set()

    previous = {}
    for sig in (signal.SIGINT, signal.SIGTERM):
        previous[sig] = signal.signal(sig, handle)
    return previous


def silence_stdout():
    """Point stdout at devnull so the interpreter's final flush cannot fail."""
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, sys.stdout.fileno())


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args)
    except CpuloadError as e:
        setup_logger(log_file=args.log_file)
        logger.error(str(e))
        return 1

    setup_logger(level=logging.getLevelName(config.log_level.upper()), log_file=args.log_file)

    try:
        cpu_count, interface = resolve_startup(config)
    except StartupError as e:
        logger.error(str(e))
        return 1

    logger.debug(f"Sampling {cpu_count} CPUs and interface {interface} every {config.interval}s")

    sinks = [make_printer(config.output_format)]
    poster = ReportPoster(config.post_url) if config.post_url else None
    if poster is not None:
        sinks.append(poster)

    stop_event = threading.Event()
    sampler = Sampler(cpu_count, interface, config, sinks=sinks, stop_event=stop_event)
    previous_handlers = install_signal_handlers(stop_event)
    try:
        sampler.run()
    except StartupError as e:
        logger.error(str(e))
        return 1
    except BrokenPipeError:
        # reader of stdout went away (e.g. piped into head)
        silence_stdout()
        return 0
    finally:
        for sig, handler in previous_handlers.items():
            signal.signal(sig, handler)
        if poster is not None:
            poster.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
