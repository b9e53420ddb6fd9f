"""hostdash - Main Textual application."""

import logging
import sys
from collections.abc import Sequence
from queue import Empty, Queue

from textual import events
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import ProgressBar, Static

from hostdash.config import Settings, configure_logging, parse_args
from hostdash.errors import ErrorKind
from hostdash.models import (
    CPU_TARGET,
    MEMORY_TARGET,
    ArmTick,
    Command,
    Event,
    InitProgress,
    KeyEvent,
    MetricSnapshot,
    Quit,
    ResizeEvent,
    SetProgress,
    disk_target,
    mountpoint_of,
)
from hostdash.reconcile import initial_snapshot, reconcile, startup_commands
from hostdash.render import (
    DEFAULT_THEME,
    Theme,
    cpu_text,
    disk_text,
    exit_message,
    info_text,
    is_left_column,
    memory_text,
    title_text,
)
from hostdash.scheduler import SamplingScheduler
from hostdash.sources import MetricSource

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.05


class MetricPanel(Vertical):
    """Bordered box with a text line and a progress bar."""

    DEFAULT_CSS = f"""
    MetricPanel {{
        height: auto;
        border: round {DEFAULT_THEME.border};
        padding: 1 1;
    }}

    MetricPanel > ProgressBar {{
        width: 100%;
    }}

    MetricPanel > ProgressBar > Bar {{
        width: 1fr;
    }}

    MetricPanel Bar > .bar--bar {{
        color: {DEFAULT_THEME.bar};
    }}

    MetricPanel Bar > .bar--complete {{
        color: {DEFAULT_THEME.bar_complete};
    }}
    """

    def __init__(
        self,
        label: str = "",
        fraction: float = 0.0,
        palette: Theme = DEFAULT_THEME,
        **kwargs,
    ) -> None:
        """Initialize MetricPanel."""
        super().__init__(**kwargs)
        self._label = label
        self._fraction = fraction
        self._palette = palette

    @property
    def label(self) -> str:
        """Text currently shown above the bar."""
        return self._label

    @property
    def fraction(self) -> float:
        """Bar position in [0, 1]."""
        return self._fraction

    def compose(self) -> ComposeResult:
        """Compose the label and progress bar."""
        yield Static(self._label, classes="panel-label")
        yield ProgressBar(total=100, show_eta=False)

    def on_mount(self) -> None:
        """Colour the bar from the palette and show the pending fraction."""
        self.styles.border = ("round", self._palette.border)
        bar = self.query_one("Bar")
        bar.get_component_styles("bar--bar").color = self._palette.bar
        bar.get_component_styles("bar--complete").color = self._palette.bar_complete
        self._refresh_bar()

    def set_label(self, label: str) -> None:
        """Replace the label text."""
        self._label = label
        if self.is_mounted:
            self.query_one(".panel-label", Static).update(label)

    def set_fraction(self, fraction: float) -> None:
        """Move the bar, clamped to [0, 1]."""
        self._fraction = min(1.0, max(0.0, fraction))
        if self.is_mounted:
            self._refresh_bar()

    def _refresh_bar(self) -> None:
        """Push the stored fraction into the ProgressBar."""
        self.query_one(ProgressBar).update(progress=self._fraction * 100)


class HostDashApp(App):
    """Main hostdash application."""

    TITLE = "hostdash"
    SUB_TITLE = "Host Resource Monitor"

    CSS = """
    Screen {
        layout: vertical;
        overflow-y: auto;
    }

    #title {
        width: 100%;
        content-align: center middle;
        margin: 0 1;
    }

    #info {
        height: auto;
        border: round $primary;
        padding: 1 1;
    }

    #cpu-mem, #disks {
        height: auto;
    }

    #cpu-mem > MetricPanel, #disks > Vertical {
        width: 1fr;
    }

    #disks > Vertical {
        height: auto;
    }
    """

    def __init__(
        self,
        settings: Settings | None = None,
        source: MetricSource | None = None,
        palette: Theme = DEFAULT_THEME,
    ) -> None:
        """Initialize the HostDashApp."""
        super().__init__()
        self._settings = settings if settings is not None else Settings()
        self._source = source if source is not None else MetricSource()
        self._palette = palette
        self._event_queue: Queue[Event] = Queue()
        self._scheduler = SamplingScheduler(
            self._event_queue,
            self._source,
            tick_interval=self._settings.tick_interval,
            cpu_window=self._settings.cpu_window,
        )
        self._state = initial_snapshot(self._source)
        self._panels: dict[str, MetricPanel] = {}
        self._quitting = False

    @property
    def snapshot(self) -> MetricSnapshot:
        """Current application state (read it, do not mutate it)."""
        return self._state

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield Static(title_text(self._palette), id="title")
        yield Static(info_text(self._state, self._palette), id="info")
        with Horizontal(id="cpu-mem"):
            yield MetricPanel(cpu_text(self._state), palette=self._palette, id="cpu-panel")
            yield MetricPanel(memory_text(self._state), palette=self._palette, id="mem-panel")
        with Horizontal(id="disks"):
            yield Vertical(id="disks-left")
            yield Vertical(id="disks-right")

    def on_mount(self) -> None:
        """Lay out the initial frame, then start the scheduler."""
        self._panels[CPU_TARGET] = self.query_one("#cpu-panel", MetricPanel)
        self._panels[MEMORY_TARGET] = self.query_one("#mem-panel", MetricPanel)
        self._apply_palette()
        self._apply(startup_commands(self._state))
        self._render_state()

        self._scheduler.start()
        self.set_interval(POLL_INTERVAL, self._drain_events)

    def on_unmount(self) -> None:
        """Stop the producers when the app goes away."""
        self._scheduler.stop(timeout=0)

    def on_resize(self, event: events.Resize) -> None:
        """Record the new viewport size."""
        self._drain_events()
        self.feed_event(ResizeEvent(width=event.size.width, height=event.size.height))

    def on_key(self, event: events.Key) -> None:
        """Route key presses through the reconciler (q quits)."""
        # Samples already queued arrived first
        self._drain_events()
        self.feed_event(KeyEvent(key=event.key))

    def _drain_events(self) -> None:
        """Feed every queued event to the reconciler, in arrival order."""
        while not self._quitting:
            try:
                event = self._event_queue.get_nowait()
            except Empty:
                break
            self.feed_event(event)

    def feed_event(self, event: Event) -> None:
        """Reconcile one event, apply its commands and redraw."""
        if self._quitting:
            return
        self._state, commands = reconcile(self._state, event, self._source)
        self._apply(commands)
        self._render_state()

    def _apply(self, commands: Sequence[Command]) -> None:
        """Carry out reconciler commands; stops at the first Quit."""
        for command in commands:
            if isinstance(command, InitProgress):
                self._mount_disk_panel(command.target)
            elif isinstance(command, SetProgress):
                panel = self._panels.get(command.target)
                if panel is not None:
                    panel.set_fraction(command.fraction)
            elif isinstance(command, ArmTick):
                self._scheduler.arm_tick()
            elif isinstance(command, Quit):
                self._quit(command.error)
                return

    def _mount_disk_panel(self, target: str) -> None:
        """Add a panel for a newly seen disk to its column."""
        mountpoint = mountpoint_of(target)
        if mountpoint is None or target in self._panels:
            return
        index = next(
            i for i, disk in enumerate(self._state.disks) if disk.mountpoint == mountpoint
        )
        disk = self._state.disks[index]
        panel = MetricPanel(disk_text(disk), disk.fraction, self._palette, classes="disk-panel")
        column_id = "#disks-left" if is_left_column(index) else "#disks-right"
        self.query_one(column_id, Vertical).mount(panel)
        self._panels[target] = panel

    def _render_state(self) -> None:
        """Redraw every panel's text from the current snapshot."""
        if CPU_TARGET not in self._panels:
            return  # not mounted yet
        self.query_one("#info", Static).update(info_text(self._state, self._palette))
        self._panels[CPU_TARGET].set_label(cpu_text(self._state))
        self._panels[MEMORY_TARGET].set_label(memory_text(self._state))
        for disk in self._state.disks:
            panel = self._panels.get(disk_target(disk.mountpoint))
            if panel is not None:
                panel.set_label(disk_text(disk))

    def _apply_palette(self) -> None:
        """Colour the title bar and info box from the palette."""
        title = self.query_one("#title", Static)
        title.styles.color = self._palette.title_fg
        title.styles.background = self._palette.title_bg
        self.query_one("#info", Static).styles.border = ("round", self._palette.border)

    def _quit(self, error: ErrorKind | None) -> None:
        """Stop the producers and exit, with status 1 on a fatal error."""
        self._quitting = True
        self._scheduler.stop(timeout=0)
        if error is None:
            self.exit()
            return
        self.exit(return_code=1, message=exit_message(error))


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for the hostdash application."""
    settings = parse_args(argv)
    configure_logging(settings)

    app = HostDashApp(settings)
    try:
        app.run()
    except Exception as exc:
        logger.exception("Dashboard failed to run")
        print(f"Error starting dashboard: {exc}", file=sys.stderr)
        sys.exit(1)
    sys.exit(app.return_code or 0)


if __name__ == "__main__":
    main()
