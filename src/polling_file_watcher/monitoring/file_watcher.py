"""
Polling file watcher for detecting changes in directory trees.

Periodically re-scans registered directory trees, compares each scan with
the previous one, and notifies registered listeners of created, modified
and deleted files and directories. No OS-level change notification is used.
"""

import logging
from pathlib import Path
from typing import Any

from polling_file_watcher.config import WatcherConfig
from polling_file_watcher.core.interfaces import IFileNotificationListener, IFileScanner
from polling_file_watcher.models import ConfigurationError, DiffResult, MonitoringError
from polling_file_watcher.monitoring.monitoring_coordinator import MonitoringCoordinator
from polling_file_watcher.monitoring.registry import DirectoryRegistry
from polling_file_watcher.monitoring.scanner import FileScanner
from polling_file_watcher.monitoring.scheduler import CycleScheduler

logger = logging.getLogger(__name__)


class FileWatcher:
    """
    Entry point for polling-based change notification.

    Register listeners against directories, then ``start`` the watcher to
    scan every registered tree once per interval. Notifications are
    delivered on the watcher's own background thread, one listener call at
    a time; a slow listener delays every later notification.

    Instances are independent: several watchers with different
    configurations can run in the same process.
    """

    def __init__(
        self,
        config: WatcherConfig | None = None,
        scanner: IFileScanner | None = None,
        coordinator: MonitoringCoordinator | None = None,
    ):
        """
        Initialize the file watcher.

        Args:
            config: Watcher configuration (defaults loaded from environment if not provided)
            scanner: Optional scanner (will create if not provided)
            coordinator: Optional cycle coordinator; its registry and scanner
                are used instead of creating new ones, so the configuration's
                ``prune_unwatched_roots``, ``ignored_patterns`` and
                ``initial_scan_notification_required`` settings do not apply to it

        Raises:
            ConfigurationError: If both a scanner and a coordinator are given
        """
        self.config = config or WatcherConfig()

        if coordinator is not None and scanner is not None:
            raise ConfigurationError(
                "Pass either a scanner or a coordinator, not both; the coordinator brings its own scanner",
                config_key="scanner",
            )

        if coordinator is None:
            coordinator = MonitoringCoordinator(
                registry=DirectoryRegistry(prune_unwatched_roots=self.config.prune_unwatched_roots),
                scanner=scanner or FileScanner(should_ignore=self.config.should_ignore),
                initial_scan_notification_required=self.config.initial_scan_notification_required,
            )

        self.coordinator = coordinator
        self.registry = coordinator.registry
        self.scanner = coordinator.scanner
        self.scheduler = CycleScheduler(tick=self._run_scheduled_cycle, name=f"polling-file-watcher-{id(self):x}")

    def _run_scheduled_cycle(self) -> None:
        self.coordinator.run_cycle(should_run=self.scheduler.tick_is_current)

    @property
    def interval_ms(self) -> int:
        """Scan interval in milliseconds; takes effect on the next ``start``."""
        return self.config.interval_ms

    @interval_ms.setter
    def interval_ms(self, value: int) -> None:
        self.config.interval_ms = value

    @property
    def initial_scan_notification_required(self) -> bool:
        """Whether the first cycle after a start notifies listeners of everything found."""
        return self.coordinator.initial_scan_notification_required

    @initial_scan_notification_required.setter
    def initial_scan_notification_required(self, value: bool) -> None:
        self.config.initial_scan_notification_required = value
        self.coordinator.initial_scan_notification_required = value

    def register_listener(self, listener: IFileNotificationListener, directory: str | Path) -> "FileWatcher":
        """
        Register a listener for changes beneath a directory.

        Args:
            listener: Listener to notify
            directory: Directory to watch

        Returns:
            This watcher, for chaining

        Raises:
            NotFoundError: If the directory is blank, missing, or not a directory
        """
        registered = self.registry.register(listener, directory)
        logger.info("Registered listener %r for %s", listener, registered)
        return self

    def unregister_listener(self, listener: IFileNotificationListener, directory: str | Path) -> None:
        """
        Stop notifying a listener about a directory.

        Args:
            listener: Listener to remove
            directory: Directory it was registered against
        """
        self.registry.unregister(listener, directory)

    def start(self) -> "FileWatcher":
        """
        Start periodic scanning at the configured interval.

        Calling ``start`` on a running watcher restarts the schedule.

        Returns:
            This watcher, for chaining

        Raises:
            MonitoringError: If the watcher has been shut down
        """
        if self.scheduler.is_shut_down:
            raise MonitoringError("File watcher has been shut down and cannot be restarted", operation="start")

        self.scheduler.start(self.config.interval_seconds)
        logger.info("File watcher started for %d root(s)", len(self.registry.get_roots()))
        return self

    def stop(self) -> "FileWatcher":
        """
        Stop scanning and discard the snapshot; restartable with ``start``.

        The next ``start`` begins with a fresh baseline scan. Listener
        registrations are kept.

        Returns:
            This watcher, for chaining
        """
        self.scheduler.stop()
        self.coordinator.reset()
        logger.info("File watcher stopped")
        return self

    def shutdown(self) -> None:
        """
        Stop permanently, release the background thread and drop all registrations.

        Waits at most ``join_timeout_seconds`` for an in-flight cycle. If the
        cycle is still running after that (for example a listener that never
        returns), the snapshot is left for that cycle to finish with instead
        of blocking until it does.
        """
        self.scheduler.stop()
        if self.scheduler.shutdown(timeout=self.config.join_timeout_seconds):
            self.coordinator.reset()
        else:
            logger.warning("Scan cycle still running after shutdown timeout; snapshot left in place")
        self.registry.clear()
        logger.info("File watcher shut down")

    def scan_now(self) -> DiffResult:
        """
        Run one cycle synchronously on the calling thread.

        The cycle never overlaps a background cycle and follows the same
        first-cycle policy.

        Returns:
            The cycle's diff result

        Raises:
            MonitoringError: If the watcher has been shut down
        """
        if self.scheduler.is_shut_down:
            raise MonitoringError("File watcher has been shut down", operation="scan_now")
        return self.coordinator.run_cycle()

    @property
    def is_running(self) -> bool:
        """Check if periodic scanning is active."""
        return self.scheduler.is_running

    def get_watched_paths(self) -> list[str]:
        """Get list of currently scanned root directories."""
        return self.registry.get_roots()

    def get_monitoring_stats(self) -> dict[str, Any]:
        """
        Get watcher statistics.

        Returns:
            Dictionary with watcher statistics
        """
        return {
            "running": self.is_running,
            "scheduler_state": self.scheduler.state.value,
            "watched_paths": self.get_watched_paths(),
            "listener_count": self.registry.get_listener_count(),
            "cycle_stats": self.coordinator.get_monitoring_stats(),
            "configuration": {
                "interval_ms": self.config.interval_ms,
                "initial_scan_notification_required": self.initial_scan_notification_required,
                "prune_unwatched_roots": self.config.prune_unwatched_roots,
                "ignored_patterns": list(self.config.ignored_patterns),
            },
        }

    def __enter__(self) -> "FileWatcher":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.shutdown()
