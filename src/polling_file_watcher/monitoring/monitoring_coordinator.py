"""
Monitoring coordinator for scan cycles.

Coordinates the registry, scanner, snapshot differ and dispatcher to run
one complete scan, diff, dispatch and commit cycle, and keeps statistics
about the cycles it has run.
"""

import logging
import threading
import time
from collections.abc import Callable
from typing import Any

from polling_file_watcher.core.interfaces import IFileScanner
from polling_file_watcher.models import DiffResult, DispatchReport, FileRecord
from polling_file_watcher.monitoring.dispatcher import EventDispatcher
from polling_file_watcher.monitoring.registry import DirectoryRegistry
from polling_file_watcher.monitoring.snapshot_differ import SnapshotDiffer

logger = logging.getLogger(__name__)

MAX_RECORDED_ERRORS = 100


class MonitoringCoordinator:
    """
    Runs scan cycles against a registry.

    Cycles and resets are serialized by a reentrant lock, so a reset issued
    while a cycle is running waits for that cycle to commit first, and a
    listener that stops the watcher from inside a callback does not
    deadlock.
    """

    def __init__(
        self,
        registry: DirectoryRegistry,
        scanner: IFileScanner,
        differ: SnapshotDiffer | None = None,
        dispatcher: EventDispatcher | None = None,
        initial_scan_notification_required: bool = False,
    ):
        """
        Initialize the monitoring coordinator.

        Args:
            registry: Registry providing roots and listeners
            scanner: Scanner used to enumerate each root
            differ: Optional snapshot differ (will create if not provided)
            dispatcher: Optional dispatcher (will create if not provided)
            initial_scan_notification_required: Dispatch the first cycle's
                creation events instead of establishing a silent baseline
        """
        self.registry = registry
        self.scanner = scanner
        self.differ = differ or SnapshotDiffer()
        self.dispatcher = dispatcher or EventDispatcher()
        self.initial_scan_notification_required = initial_scan_notification_required

        self._cycle_lock = threading.RLock()
        # Bumped by reset so a cycle reset from inside a listener does not commit
        self._epoch = 0

        # Statistics tracking
        self._stats = self._empty_stats()

    @staticmethod
    def _empty_stats() -> dict[str, Any]:
        return {
            "cycles_completed": 0,
            "cycles_failed": 0,
            "last_cycle_duration_seconds": None,
            "last_scan_record_count": 0,
            "events": {"created": 0, "modified": 0, "deleted": 0},
            "notifications_delivered": 0,
            "listener_failures": 0,
            "errors": [],
        }

    def run_cycle(self, should_run: Callable[[], bool] | None = None) -> DiffResult:
        """
        Run one scan, diff, dispatch and commit cycle.

        Args:
            should_run: Optional check made once the cycle lock is held; when
                it returns False the cycle is skipped without touching state

        Returns:
            The cycle's diff result (empty when the cycle was skipped)

        Raises:
            Exception: Anything raised by the scanner or differ; the monitored
                set is left untouched in that case
        """
        with self._cycle_lock:
            if should_run is not None and not should_run():
                logger.debug("Skipping stale scan cycle")
                return DiffResult()

            started = time.monotonic()
            epoch = self._epoch
            try:
                roots, registrations = self.registry.snapshot()

                fresh: list[FileRecord] = []
                for root in roots:
                    fresh.extend(self.scanner.scan(root))

                result = self.differ.diff(fresh)

                if self.differ.should_notify(self.initial_scan_notification_required):
                    report = self.dispatcher.dispatch(result, registrations)
                else:
                    logger.info("Baseline established with %d entries", len(fresh))
                    report = DispatchReport()

                if epoch == self._epoch:
                    self.differ.commit(result)
            except Exception as e:
                self._record_failure(e)
                raise

            self._update_stats(result, report, len(fresh), time.monotonic() - started)

        if result.has_changes:
            logger.debug("Cycle complete: %s, %s", result, report)
        return result

    def reset(self) -> None:
        """Clear the monitored set; waits for an in-flight cycle to finish."""
        with self._cycle_lock:
            self._epoch += 1
            self.differ.reset()
        logger.debug("Snapshot state cleared")

    def _update_stats(self, result: DiffResult, report: DispatchReport, record_count: int, duration: float) -> None:
        """
        Update cycle statistics.

        Args:
            result: Diff result of the completed cycle
            report: Dispatch report of the completed cycle
            record_count: Number of records scanned
            duration: Cycle wall-clock time in seconds
        """
        self._stats["cycles_completed"] += 1
        self._stats["last_cycle_duration_seconds"] = duration
        self._stats["last_scan_record_count"] = record_count
        self._stats["events"]["created"] += len(result.created)
        self._stats["events"]["modified"] += len(result.modified)
        self._stats["events"]["deleted"] += len(result.deleted)
        self._stats["notifications_delivered"] += report.delivered
        self._stats["listener_failures"] += report.failed
        for error in report.errors:
            self._record_error(error)

    def _record_failure(self, error: Exception) -> None:
        self._stats["cycles_failed"] += 1
        self._record_error(f"cycle: {error}")

    def _record_error(self, message: str) -> None:
        self._stats["errors"].append(message)

        # Keep only the last MAX_RECORDED_ERRORS errors
        if len(self._stats["errors"]) > MAX_RECORDED_ERRORS:
            self._stats["errors"] = self._stats["errors"][-MAX_RECORDED_ERRORS:]

    def get_monitoring_stats(self) -> dict[str, Any]:
        """
        Get cycle statistics.

        Returns:
            Dictionary with cycle statistics
        """
        with self._cycle_lock:
            stats = dict(self._stats)
            stats["events"] = dict(self._stats["events"])
            stats["errors"] = list(self._stats["errors"])
            stats["monitored_entries"] = self.differ.monitored_count
            stats["baseline_established"] = not self.differ.is_first_cycle
        return stats
