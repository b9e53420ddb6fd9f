"""Pure rendering helpers for hostdash.

Every function here maps a MetricSnapshot (or part of it) to display text
and never mutates its input. Styling lives in a frozen Theme passed in by
the caller.
"""

from dataclasses import dataclass

from rich.markup import escape

from hostdash.errors import ErrorKind
from hostdash.models import DiskEntry, MetricSnapshot

TITLE = "System Monitor"


@dataclass(slots=True, frozen=True)
class Theme:
    """Read-only colour configuration for the dashboard."""

    title_fg: str = "#FFFFFF"
    title_bg: str = "#007ACC"
    border: str = "#007ACC"
    text: str = "#FFFFFF"
    bar: str = "#60bfff"
    bar_complete: str = "#bfe5ff"
    error: str = "#ff5f5f"


DEFAULT_THEME = Theme()


def title_text(theme: Theme = DEFAULT_THEME) -> str:
    return f"[bold {theme.title_fg} on {theme.title_bg}] {TITLE} [/]"


def info_text(snapshot: MetricSnapshot, theme: Theme = DEFAULT_THEME) -> str:
    """Host info panel body; a placeholder until the first tick."""
    if snapshot.last_error is not None:
        return error_text(snapshot.last_error, theme)
    body = snapshot.host_info or "Loading host info..."
    return f"[{theme.text}]{escape(body)}[/]"


def error_text(error: ErrorKind, theme: Theme = DEFAULT_THEME) -> str:
    return f"[bold {theme.error}]An error occurred: {error.value} query failed[/]"


def cpu_text(snapshot: MetricSnapshot) -> str:
    return f"CPU Usage: {snapshot.cpu_percent:.2f}%"


def memory_text(snapshot: MetricSnapshot) -> str:
    return f"Memory: {snapshot.mem_used_gb:.2f} GB / {snapshot.mem_total_gb:.2f} GB"


def disk_text(disk: DiskEntry) -> str:
    return (
        f"Disk ({escape(disk.mountpoint)}): "
        f"{disk.used_gb:.2f} GB / {disk.total_gb:.2f} GB"
    )


def is_left_column(index: int) -> bool:
    """Disk panels alternate columns: even indexes left, odd right."""
    return index % 2 == 0


def exit_message(error: ErrorKind) -> str:
    """Line printed after the UI closes on a fatal query failure."""
    return f"Error: {error.value} query failed"
