"""Shared fixtures for hostdash tests."""

import threading

import pytest

from hostdash.errors import ErrorKind, MetricSourceError
from hostdash.models import HostInfo
from hostdash.sources import MetricSource

GB = 1024**3


class FakeSource(MetricSource):
    """
    In-memory MetricSource.

    Tests set the attributes below to shape what the "host" reports, and read
    `calls` to see which queries ran and in what order.
    """

    def __init__(self) -> None:
        self.cpu_percent = 37.0
        self.fail_cpu = False
        self.memory = (2 * GB, 4 * GB)
        self.fail_memory = False
        self.host = HostInfo(hostname="testbox", platform="Linux 6.1", uptime_seconds=93784)
        self.fail_host = False
        self.partitions: list[str] = ["/", "/home"]
        self.fail_partitions = False
        self.usage: dict[str, tuple[int, int]] = {
            "/": (10 * GB, 100 * GB),
            "/home": (50 * GB, 200 * GB),
        }
        self.failing_disks: set[str] = set()
        self.calls: list[str] = []
        self.closed = threading.Event()
        self._parked = threading.Event()

    def sample_cpu_percent(self, window: float) -> float:
        self.calls.append("cpu")
        # Stands in for the blocking measurement
        if self.closed.wait(window):
            # Torn down: park any sampler thread still running
            self._parked.wait()
        if self.fail_cpu:
            raise MetricSourceError(ErrorKind.CPU)
        return self.cpu_percent

    def query_memory(self) -> tuple[int, int]:
        self.calls.append("memory")
        if self.fail_memory:
            raise MetricSourceError(ErrorKind.MEMORY)
        return self.memory

    def query_host_info(self) -> HostInfo:
        self.calls.append("host")
        if self.fail_host:
            raise MetricSourceError(ErrorKind.HOST)
        return self.host

    def list_partitions(self) -> list[str]:
        self.calls.append("partitions")
        if self.fail_partitions:
            raise MetricSourceError(ErrorKind.PARTITIONS)
        return list(self.partitions)

    def query_disk_usage(self, mountpoint: str) -> tuple[int, int]:
        self.calls.append(f"disk:{mountpoint}")
        if mountpoint in self.failing_disks or mountpoint not in self.usage:
            raise MetricSourceError(ErrorKind.DISK, mountpoint=mountpoint)
        return self.usage[mountpoint]


@pytest.fixture
def fake_source():
    source = FakeSource()
    yield source
    source.closed.set()
