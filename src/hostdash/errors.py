"""Error types raised by the metric source adapter."""

from enum import Enum


class ErrorKind(Enum):
    """Which metric query failed."""

    MEMORY = "memory"
    HOST = "host"
    PARTITIONS = "partitions"
    DISK = "disk"
    CPU = "cpu"


class MetricSourceError(Exception):
    """A metric query against the host failed."""

    def __init__(self, kind: ErrorKind, mountpoint: str | None = None) -> None:
        self.kind = kind
        self.mountpoint = mountpoint
        if mountpoint is None:
            message = f"{kind.value} query failed"
        else:
            message = f"{kind.value} query failed for {mountpoint}"
        super().__init__(message)
