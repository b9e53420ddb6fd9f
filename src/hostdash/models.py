"""Data models for hostdash."""

from dataclasses import dataclass, field
from datetime import datetime

from hostdash.errors import ErrorKind

CPU_TARGET = "cpu"
MEMORY_TARGET = "memory"
DISK_PREFIX = "disk:"


def disk_target(mountpoint: str) -> str:
    """Progress target key for a disk panel."""
    return f"{DISK_PREFIX}{mountpoint}"


def mountpoint_of(target: str) -> str | None:
    """Inverse of disk_target; None for non-disk targets."""
    if not target.startswith(DISK_PREFIX):
        return None
    return target[len(DISK_PREFIX):]


@dataclass(slots=True)
class DiskEntry:
    """Usage of one mount point, keyed by mountpoint."""

    mountpoint: str
    used_gb: float
    total_gb: float

    @property
    def fraction(self) -> float:
        """Used share of the disk, 0.0 when the total is unknown."""
        if self.total_gb <= 0:
            return 0.0
        return self.used_gb / self.total_gb


@dataclass(slots=True, frozen=True)
class HostInfo:
    """Immutable host identity as reported by the OS."""

    hostname: str
    platform: str
    uptime_seconds: float


@dataclass(slots=True)
class MetricSnapshot:
    """Application state, mutated only by the consumer loop."""

    cpu_percent: float = 0.0
    mem_used_gb: float = 0.0
    mem_total_gb: float = 0.0
    disks: list[DiskEntry] = field(default_factory=list)
    host_info: str = ""
    last_error: ErrorKind | None = None
    width: int = 0
    height: int = 0

    @property
    def mem_fraction(self) -> float:
        """Used share of memory, 0.0 before the first tick."""
        if self.mem_total_gb <= 0:
            return 0.0
        return self.mem_used_gb / self.mem_total_gb

    def find_disk(self, mountpoint: str) -> DiskEntry | None:
        """Return the entry for a mountpoint, if it has been seen."""
        for disk in self.disks:
            if disk.mountpoint == mountpoint:
                return disk
        return None


# Events consumed by the reconciler


@dataclass(slots=True, frozen=True)
class TickEvent:
    """Periodic trigger for the memory/disk/host refresh."""

    at: datetime


@dataclass(slots=True, frozen=True)
class CpuSampleEvent:
    """Result of one blocking CPU measurement."""

    percent: float


@dataclass(slots=True, frozen=True)
class ResizeEvent:
    """Terminal viewport changed size."""

    width: int
    height: int


@dataclass(slots=True, frozen=True)
class KeyEvent:
    """Key pressed in the terminal."""

    key: str


Event = TickEvent | CpuSampleEvent | ResizeEvent | KeyEvent


# Commands returned by the reconciler


@dataclass(slots=True, frozen=True)
class InitProgress:
    """Create the progress indicator for a newly discovered target."""

    target: str


@dataclass(slots=True, frozen=True)
class SetProgress:
    """Move a progress indicator to a fraction in [0, 1]."""

    target: str
    fraction: float


@dataclass(slots=True, frozen=True)
class ArmTick:
    """Schedule the next tick."""


@dataclass(slots=True, frozen=True)
class Quit:
    """Terminate the loop; error is None on a graceful quit."""

    error: ErrorKind | None = None


Command = InitProgress | SetProgress | ArmTick | Quit
