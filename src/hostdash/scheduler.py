"""Sampling scheduler for hostdash."""

import logging
import threading
from datetime import datetime
from queue import Queue

from hostdash.errors import MetricSourceError
from hostdash.models import CpuSampleEvent, Event, TickEvent
from hostdash.sources import MetricSource

logger = logging.getLogger(__name__)

MIN_INTERVAL = 0.1


class SamplingScheduler:
    """
    Producer side of the dashboard loop.

    Owns two independent timing sources that feed the same thread-safe Queue:

    - a tick timer, armed one period at a time with `arm_tick()`; the consumer
      re-arms it after handling each tick
    - a CPU sampler running in a daemon thread, which blocks for one
      sampling window, emits the result and immediately samples again

    CPU query failures are reported as 0% and never stop the sampler.
    """

    def __init__(
        self,
        event_queue: Queue[Event],
        source: MetricSource | None = None,
        tick_interval: float = 1.0,
        cpu_window: float = 1.0,
    ) -> None:
        """
        Initialize the SamplingScheduler.

        Args:
            event_queue: Thread-safe queue to push events to.
            source: Where CPU samples come from. Defaults to psutil.
            tick_interval: Seconds between ticks. Default 1.0s.
            cpu_window: Blocking CPU measurement window. Default 1.0s.
        """
        self._queue = event_queue
        self._source = source if source is not None else MetricSource()
        self._tick_interval = max(MIN_INTERVAL, tick_interval)
        self._cpu_window = max(MIN_INTERVAL, cpu_window)
        self._stop_event = threading.Event()
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._thread: threading.Thread | None = None

    @property
    def tick_interval(self) -> float:
        """Get the tick period."""
        return self._tick_interval

    @property
    def cpu_window(self) -> float:
        """Get the CPU sampling window."""
        return self._cpu_window

    @property
    def is_running(self) -> bool:
        """Check if the CPU sampler thread is running."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the CPU sampler and schedule the first tick."""
        if self.is_running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._sample_loop,
            daemon=True,
            name="CpuSampler",
        )
        self._thread.start()
        self.arm_tick()

    def stop(self, timeout: float | None = 5.0) -> None:
        """
        Stop both timing sources.

        Args:
            timeout: How long to wait for the sampler thread to finish (seconds).
        """
        self._stop_event.set()
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None

    def arm_tick(self) -> None:
        """Schedule a single TickEvent one period from now."""
        with self._lock:
            if self._stop_event.is_set():
                return
            timer = threading.Timer(self._tick_interval, self._fire_tick)
            timer.daemon = True
            timer.name = "TickTimer"
            self._timer = timer
            timer.start()

    def _fire_tick(self) -> None:
        if self._stop_event.is_set():
            return
        self._queue.put(TickEvent(at=datetime.now()))

    def _sample_loop(self) -> None:
        """Main sampling loop running in the background thread."""
        while not self._stop_event.is_set():
            percent = self._sample_once()
            if self._stop_event.is_set():
                break
            self._queue.put(CpuSampleEvent(percent=percent))

    def _sample_once(self) -> float:
        try:
            return self._source.sample_cpu_percent(self._cpu_window)
        except MetricSourceError as exc:
            logger.debug("CPU sample failed, reporting 0: %s", exc)
            return 0.0
