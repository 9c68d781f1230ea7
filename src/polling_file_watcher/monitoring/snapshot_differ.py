"""
Snapshot comparison for the polling file watcher.

Holds the monitored set between cycles and classifies each fresh scan
against it. Deletions cannot be observed directly, so classification is a
two-pass process: every fresh record is matched by path against the
monitored set, and whatever is left unmatched afterwards has been deleted.
"""

import logging
import threading
from collections.abc import Iterable

from polling_file_watcher.models import DiffResult, FileRecord

logger = logging.getLogger(__name__)


class SnapshotDiffer:
    """
    Owner of the monitored set.

    ``diff`` never mutates state; the monitored set only changes on
    ``commit`` (after dispatch) and ``reset``. Both swap the whole mapping
    in one assignment, so readers of ``snapshot`` never see a partial
    update.
    """

    def __init__(self):
        self._monitored: dict[str, FileRecord] = {}
        self._first_cycle = True
        self._lock = threading.Lock()

    def diff(self, fresh_records: Iterable[FileRecord]) -> DiffResult:
        """
        Classify a fresh scan against the monitored set.

        Args:
            fresh_records: Records from scanning every root this cycle

        Returns:
            DiffResult with created, modified, deleted and unchanged records
        """
        monitored = self._monitored
        candidates = dict(monitored)
        seen: set[str] = set()

        created: list[FileRecord] = []
        modified: list[tuple[FileRecord, FileRecord]] = []
        unchanged: list[FileRecord] = []

        for record in fresh_records:
            if record.is_backup or record.path in seen:
                continue
            seen.add(record.path)

            previous = monitored.get(record.path)
            if previous is None:
                created.append(record)
                continue

            candidates.pop(record.path, None)
            if previous.last_modified_ns == record.last_modified_ns:
                unchanged.append(previous)
            else:
                modified.append((previous, record))

        result = DiffResult(
            created=created,
            modified=modified,
            deleted=list(candidates.values()),
            unchanged=unchanged,
        )
        logger.debug("Diff complete: %s", result)
        return result

    def commit(self, result: DiffResult) -> None:
        """
        Make a diff result's carried-forward records the new monitored set.

        Args:
            result: The result returned by ``diff`` for this cycle
        """
        new_state = {record.path: record for record in result.carried_forward()}
        with self._lock:
            self._monitored = new_state
            self._first_cycle = False

    def should_notify(self, initial_scan_notification_required: bool) -> bool:
        """
        Decide whether this cycle's changes are dispatched.

        The first cycle after construction or ``reset`` only establishes a
        baseline unless initial notifications are requested.
        """
        return initial_scan_notification_required or not self._first_cycle

    def reset(self) -> None:
        """Forget the monitored set; the next cycle is a fresh baseline."""
        with self._lock:
            self._monitored = {}
            self._first_cycle = True

    @property
    def is_first_cycle(self) -> bool:
        """Whether no cycle has been committed since construction or reset."""
        return self._first_cycle

    @property
    def monitored_count(self) -> int:
        """Number of records in the monitored set."""
        return len(self._monitored)

    def snapshot(self) -> tuple[FileRecord, ...]:
        """Get a copy of the monitored set."""
        return tuple(self._monitored.values())
