"""Tests for hostdash data models."""

from hostdash.errors import ErrorKind, MetricSourceError
from hostdash.models import (
    CpuSampleEvent,
    DiskEntry,
    HostInfo,
    MetricSnapshot,
    Quit,
    disk_target,
    mountpoint_of,
)


def test_disk_entry_fraction():
    """Test DiskEntry reports its used share."""
    disk = DiskEntry(mountpoint="/", used_gb=25.0, total_gb=100.0)

    assert disk.fraction == 0.25


def test_disk_entry_zero_total():
    """Test a zero-size disk reports 0 rather than dividing by zero."""
    disk = DiskEntry(mountpoint="/empty", used_gb=0.0, total_gb=0.0)

    assert disk.fraction == 0.0


def test_disk_entry_is_mutable():
    """Test DiskEntry values can be updated in place."""
    disk = DiskEntry(mountpoint="/", used_gb=1.0, total_gb=2.0)
    disk.used_gb = 1.5

    assert disk.used_gb == 1.5


def test_snapshot_defaults():
    """Test a fresh MetricSnapshot is all zero."""
    snapshot = MetricSnapshot()

    assert snapshot.cpu_percent == 0.0
    assert snapshot.mem_used_gb == 0.0
    assert snapshot.mem_total_gb == 0.0
    assert snapshot.disks == []
    assert snapshot.host_info == ""
    assert snapshot.last_error is None
    assert snapshot.mem_fraction == 0.0


def test_snapshots_do_not_share_disks():
    """Test each snapshot gets its own disk list."""
    first = MetricSnapshot()
    second = MetricSnapshot()
    first.disks.append(DiskEntry("/", 1.0, 2.0))

    assert second.disks == []


def test_find_disk():
    """Test lookup of disks by mountpoint."""
    snapshot = MetricSnapshot(disks=[DiskEntry("/", 1.0, 2.0), DiskEntry("/home", 3.0, 4.0)])

    assert snapshot.find_disk("/home") is snapshot.disks[1]
    assert snapshot.find_disk("/missing") is None


def test_disk_target_round_trip():
    """Test disk targets map back to their mountpoint."""
    assert disk_target("/mnt/data") == "disk:/mnt/data"
    assert mountpoint_of("disk:/mnt/data") == "/mnt/data"
    assert mountpoint_of("cpu") is None


def test_events_are_frozen():
    """Test that events are immutable (frozen)."""
    event = CpuSampleEvent(percent=10.0)

    try:
        event.percent = 20.0
        raise AssertionError("Should have raised FrozenInstanceError")
    except AttributeError:
        pass  # Expected behavior for frozen dataclass


def test_host_info_uses_slots():
    """Test that HostInfo uses __slots__."""
    info = HostInfo(hostname="h", platform="p", uptime_seconds=1.0)

    assert not hasattr(info, "__dict__")


def test_quit_defaults_to_graceful():
    """Test Quit without an error is a graceful quit."""
    assert Quit().error is None


def test_metric_source_error_message():
    """Test MetricSourceError carries its kind and mountpoint."""
    error = MetricSourceError(ErrorKind.DISK, mountpoint="/mnt")

    assert error.kind is ErrorKind.DISK
    assert error.mountpoint == "/mnt"
    assert str(error) == "disk query failed for /mnt"
    assert str(MetricSourceError(ErrorKind.MEMORY)) == "memory query failed"
