"""
Periodic cycle scheduler for the polling file watcher.

Runs a tick function at a fixed interval on one dedicated background
thread. Ticks never overlap: when a tick outlasts the interval, the next
one starts as soon as it finishes.
"""

import logging
import threading
import time
from collections.abc import Callable
from enum import Enum

from polling_file_watcher.models import MonitoringError

logger = logging.getLogger(__name__)


class SchedulerState(str, Enum):
    """Lifecycle states of the scheduler."""

    STOPPED = "stopped"
    RUNNING = "running"
    SHUT_DOWN = "shut_down"


class CycleScheduler:
    """
    Drives a tick function from a single background thread.

    The thread is created on the first ``start`` and lives until
    ``shutdown``; ``stop`` only parks it. ``stop`` does not interrupt a
    tick already in progress.
    """

    def __init__(self, tick: Callable[[], object], name: str = "polling-file-watcher"):
        """
        Initialize the scheduler.

        Args:
            tick: Function run once per cycle
            name: Name given to the background thread
        """
        self.tick = tick
        self.name = name

        self._condition = threading.Condition()
        self._state = SchedulerState.STOPPED
        self._interval_seconds = 2.0
        # Bumped on every start/stop so a waiting loop notices the change
        self._generation = 0
        self._tick_generation: int | None = None
        self._thread: threading.Thread | None = None

    def start(self, interval_seconds: float) -> None:
        """
        Start (or restart) periodic ticking; the first tick runs immediately.

        Args:
            interval_seconds: Delay between the starts of consecutive ticks

        Raises:
            MonitoringError: If the scheduler has been shut down
            ValueError: If the interval is not positive
        """
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")

        with self._condition:
            if self._state is SchedulerState.SHUT_DOWN:
                raise MonitoringError("Scheduler has been shut down and cannot be restarted", operation="start")

            self._interval_seconds = interval_seconds
            self._state = SchedulerState.RUNNING
            self._generation += 1

            if self._thread is None:
                self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
                self._thread.start()

            self._condition.notify_all()

        logger.info("Scheduler started (interval: %.3fs)", interval_seconds)

    def stop(self) -> None:
        """Stop scheduling further ticks; restartable with ``start``."""
        with self._condition:
            if self._state is not SchedulerState.RUNNING:
                logger.debug("Scheduler not running, nothing to stop")
                return
            self._state = SchedulerState.STOPPED
            self._generation += 1
            self._condition.notify_all()

        logger.info("Scheduler stopped")

    def shutdown(self, timeout: float | None = 5.0) -> bool:
        """
        Stop permanently and release the background thread.

        Args:
            timeout: Seconds to wait for an in-flight tick to finish

        Returns:
            False if the background thread was still busy when the timeout
            expired, True otherwise
        """
        with self._condition:
            already_shut_down = self._state is SchedulerState.SHUT_DOWN
            if not already_shut_down:
                self._state = SchedulerState.SHUT_DOWN
                self._generation += 1
                self._condition.notify_all()
            thread = self._thread

        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)
            if thread.is_alive():
                logger.warning("Scheduler thread did not finish within %ss", timeout)
                return False

        if not already_shut_down:
            logger.info("Scheduler shut down")
        return True

    def _run(self) -> None:
        while True:
            with self._condition:
                while self._state is SchedulerState.STOPPED:
                    self._condition.wait()
                if self._state is SchedulerState.SHUT_DOWN:
                    return
                generation = self._generation
                self._tick_generation = generation
                interval = self._interval_seconds

            started = time.monotonic()
            try:
                self.tick()
            except Exception as e:
                logger.error("Scan cycle failed: %s", e)

            deadline = started + interval
            with self._condition:
                while self._state is SchedulerState.RUNNING and self._generation == generation:
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        break
                    self._condition.wait(remaining)

    def tick_is_current(self) -> bool:
        """
        Check whether the tick in progress still belongs to the active run.

        False once the scheduler has been stopped, restarted or shut down
        since the tick began. Only meaningful when called from inside a tick.
        """
        with self._condition:
            return self._state is SchedulerState.RUNNING and self._generation == self._tick_generation

    @property
    def state(self) -> SchedulerState:
        """Current lifecycle state."""
        return self._state

    @property
    def is_running(self) -> bool:
        """Whether ticks are currently being scheduled."""
        return self._state is SchedulerState.RUNNING

    @property
    def is_shut_down(self) -> bool:
        """Whether the scheduler has been permanently shut down."""
        return self._state is SchedulerState.SHUT_DOWN
