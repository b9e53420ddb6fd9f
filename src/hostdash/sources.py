"""Metric source adapter for hostdash.

Thin wrappers around psutil. Every query either returns plain values or
raises MetricSourceError carrying the ErrorKind of the failed query, so
callers decide between failing fast and skipping.
"""

import platform
import socket
import time

import psutil

from hostdash.errors import ErrorKind, MetricSourceError
from hostdash.models import HostInfo

BYTES_PER_GB = 1024**3


def bytes_to_gb(size: int | float) -> float:
    """Convert a byte count to gigabytes (2**30 bytes)."""
    return size / BYTES_PER_GB


def format_uptime(seconds: float) -> str:
    """Format uptime as 'D days H hrs M min S s'."""
    total = int(seconds)
    days = total // 86400
    hours = (total % 86400) // 3600
    minutes = (total % 3600) // 60
    secs = total % 60
    return f"{days} days {hours} hrs {minutes} min {secs} s"


def format_host_info(info: HostInfo) -> str:
    """Render host identity as the info panel text."""
    return (
        f"Hostname: {info.hostname}\n"
        f"OS: {info.platform}\n"
        f"Uptime: {format_uptime(info.uptime_seconds)}"
    )


def sample_cpu_percent(window: float) -> float:
    """Measure overall CPU utilization, blocking for `window` seconds."""
    try:
        return float(psutil.cpu_percent(interval=window))
    except (psutil.Error, OSError) as exc:
        raise MetricSourceError(ErrorKind.CPU) from exc


def query_memory() -> tuple[int, int]:
    """Return (used_bytes, total_bytes) of virtual memory."""
    try:
        mem = psutil.virtual_memory()
    except (psutil.Error, OSError) as exc:
        raise MetricSourceError(ErrorKind.MEMORY) from exc
    return mem.used, mem.total


def list_partitions() -> list[str]:
    """Return the mountpoints of physical partitions, in OS order."""
    try:
        partitions = psutil.disk_partitions(all=False)
    except (psutil.Error, OSError) as exc:
        raise MetricSourceError(ErrorKind.PARTITIONS) from exc
    return [part.mountpoint for part in partitions]


def query_disk_usage(mountpoint: str) -> tuple[int, int]:
    """Return (used_bytes, total_bytes) for one mountpoint."""
    try:
        usage = psutil.disk_usage(mountpoint)
    except (psutil.Error, OSError) as exc:
        raise MetricSourceError(ErrorKind.DISK, mountpoint=mountpoint) from exc
    return usage.used, usage.total


def query_host_info() -> HostInfo:
    """Return hostname, OS platform and uptime."""
    try:
        boot_time = psutil.boot_time()
        hostname = socket.gethostname()
    except (psutil.Error, OSError) as exc:
        raise MetricSourceError(ErrorKind.HOST) from exc
    os_name = " ".join(part for part in (platform.system(), platform.release()) if part)
    return HostInfo(
        hostname=hostname,
        platform=os_name or "unknown",
        uptime_seconds=max(0.0, time.time() - boot_time),
    )


class MetricSource:
    """
    Facade over the query functions.

    The reconciler and scheduler only talk to a MetricSource, so tests can
    substitute a subclass that returns canned values or raises.
    """

    def sample_cpu_percent(self, window: float) -> float:
        return sample_cpu_percent(window)

    def query_memory(self) -> tuple[int, int]:
        return query_memory()

    def list_partitions(self) -> list[str]:
        return list_partitions()

    def query_disk_usage(self, mountpoint: str) -> tuple[int, int]:
        return query_disk_usage(mountpoint)

    def query_host_info(self) -> HostInfo:
        return query_host_info()
