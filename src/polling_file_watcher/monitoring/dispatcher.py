"""
Event dispatch for the polling file watcher.

Routes each classified change to every listener registered against a
directory that contains the changed path. Dispatch runs synchronously on
the scan thread: modifications first, then deletions, then creations.
"""

import logging
from collections.abc import Sequence

from polling_file_watcher.core.interfaces import IFileNotificationListener
from polling_file_watcher.models import DiffResult, DispatchReport, FileRecord, WatchEventType
from polling_file_watcher.monitoring.registry import is_within

logger = logging.getLogger(__name__)

Registration = tuple[str, IFileNotificationListener]


class EventDispatcher:
    """
    Delivers diff results to listeners.

    Each listener call is isolated: an exception raised by one listener is
    logged and counted, and delivery continues with the remaining listeners
    and events.
    """

    def dispatch(self, result: DiffResult, registrations: Sequence[Registration]) -> DispatchReport:
        """
        Notify matching listeners of every change in a diff result.

        Args:
            result: Classified changes for this cycle
            registrations: ``(directory, listener)`` pairs to consider

        Returns:
            DispatchReport with delivery and failure counts
        """
        report = DispatchReport()
        if not registrations or not result.has_changes:
            return report

        for old_record, new_record in result.modified:
            for _, listener in self._matching(new_record, registrations):
                callback = listener.on_modify_directory if new_record.is_directory else listener.on_modify_file
                self._invoke(report, WatchEventType.MODIFY, new_record, callback, old_record, new_record)

        for record in result.deleted:
            for _, listener in self._matching(record, registrations):
                callback = listener.on_delete_directory if record.is_directory else listener.on_delete_file
                self._invoke(report, WatchEventType.DELETE, record, callback, record)

        for record in result.created:
            for _, listener in self._matching(record, registrations):
                callback = listener.on_create_directory if record.is_directory else listener.on_create_file
                self._invoke(report, WatchEventType.CREATE, record, callback, record)

        logger.debug("Dispatch complete: %s", report)
        return report

    @staticmethod
    def _matching(record: FileRecord, registrations: Sequence[Registration]) -> list[Registration]:
        return [(directory, listener) for directory, listener in registrations if is_within(record.path, directory)]

    @staticmethod
    def _invoke(report: DispatchReport, event_type: WatchEventType, record: FileRecord, callback, *args) -> None:
        try:
            callback(*args)
            report.record_delivery()
        except Exception as e:
            report.record_failure(f"{record.path} ({event_type.value}): {e}")
            logger.error("Error dispatching %s event for %s to %r: %s", event_type.value, record.path, callback, e)
