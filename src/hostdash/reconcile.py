"""State reconciliation for hostdash.

`reconcile` folds one event at a time into the MetricSnapshot and returns
the commands the UI has to apply. It is only ever called from the consumer
loop, so the snapshot has a single mutator.
"""

import logging

from hostdash.errors import MetricSourceError
from hostdash.models import (
    CPU_TARGET,
    MEMORY_TARGET,
    ArmTick,
    Command,
    CpuSampleEvent,
    DiskEntry,
    Event,
    InitProgress,
    KeyEvent,
    MetricSnapshot,
    Quit,
    ResizeEvent,
    SetProgress,
    TickEvent,
    disk_target,
)
from hostdash.sources import MetricSource, bytes_to_gb, format_host_info

logger = logging.getLogger(__name__)

QUIT_KEYS = frozenset({"q", "ctrl+c"})


def initial_snapshot(source: MetricSource) -> MetricSnapshot:
    """
    Build the starting snapshot.

    Disks are seeded from whatever partitions can be enumerated right now.
    Failures are tolerated here: the first tick reports them properly.
    """
    snapshot = MetricSnapshot()
    try:
        mountpoints = source.list_partitions()
    except MetricSourceError as exc:
        logger.debug("Initial partition listing failed: %s", exc)
        return snapshot

    for mountpoint in mountpoints:
        if snapshot.find_disk(mountpoint) is not None:
            continue
        try:
            used, total = source.query_disk_usage(mountpoint)
        except MetricSourceError as exc:
            logger.debug("Skipping %s at startup: %s", mountpoint, exc)
            continue
        snapshot.disks.append(
            DiskEntry(mountpoint=mountpoint, used_gb=bytes_to_gb(used), total_gb=bytes_to_gb(total))
        )
    return snapshot


def reconcile(
    state: MetricSnapshot,
    event: Event,
    source: MetricSource,
) -> tuple[MetricSnapshot, list[Command]]:
    """Fold a single event into the state and return the resulting commands."""
    if isinstance(event, CpuSampleEvent):
        state.cpu_percent = event.percent
        return state, [SetProgress(CPU_TARGET, event.percent / 100)]

    if isinstance(event, TickEvent):
        return state, _reconcile_tick(state, source)

    if isinstance(event, ResizeEvent):
        state.width = event.width
        state.height = event.height
        return state, []

    if isinstance(event, KeyEvent):
        if event.key in QUIT_KEYS:
            return state, [Quit()]
        return state, []

    return state, []


def _fail(state: MetricSnapshot, exc: MetricSourceError) -> list[Command]:
    logger.error("Fatal metric query failure: %s", exc)
    state.last_error = exc.kind
    return [Quit(exc.kind)]


def _reconcile_tick(state: MetricSnapshot, source: MetricSource) -> list[Command]:
    """Refresh memory, host info and disks for one tick."""
    commands: list[Command] = []

    try:
        mem_used, mem_total = source.query_memory()
    except MetricSourceError as exc:
        return _fail(state, exc)
    state.mem_used_gb = bytes_to_gb(mem_used)
    state.mem_total_gb = bytes_to_gb(mem_total)

    try:
        info = source.query_host_info()
    except MetricSourceError as exc:
        return _fail(state, exc)
    state.host_info = format_host_info(info)

    try:
        mountpoints = source.list_partitions()
    except MetricSourceError as exc:
        return _fail(state, exc)

    for mountpoint in mountpoints:
        try:
            used, total = source.query_disk_usage(mountpoint)
        except MetricSourceError as exc:
            # Only this partition is dropped for the cycle
            logger.debug("Skipping %s: %s", mountpoint, exc)
            continue
        commands.extend(_merge_disk(state, mountpoint, bytes_to_gb(used), bytes_to_gb(total)))

    commands.append(SetProgress(MEMORY_TARGET, state.mem_fraction))
    commands.append(ArmTick())
    return commands


def _merge_disk(
    state: MetricSnapshot,
    mountpoint: str,
    used_gb: float,
    total_gb: float,
) -> list[Command]:
    """
    Update a known disk in place or append a new one.

    Entries whose mountpoint no longer shows up are left as they are.
    """
    target = disk_target(mountpoint)
    disk = state.find_disk(mountpoint)
    if disk is not None:
        disk.used_gb = used_gb
        disk.total_gb = total_gb
        return [SetProgress(target, disk.fraction)]

    disk = DiskEntry(mountpoint=mountpoint, used_gb=used_gb, total_gb=total_gb)
    state.disks.append(disk)
    return [InitProgress(target), SetProgress(target, disk.fraction)]


def startup_commands(state: MetricSnapshot) -> list[Command]:
    """Commands that bring a fresh UI in line with an initial snapshot."""
    commands: list[Command] = [
        SetProgress(CPU_TARGET, state.cpu_percent / 100),
        SetProgress(MEMORY_TARGET, state.mem_fraction),
    ]
    for disk in state.disks:
        target = disk_target(disk.mountpoint)
        commands.append(InitProgress(target))
        commands.append(SetProgress(target, disk.fraction))
    return commands
