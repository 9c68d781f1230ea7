"""Ready-made listener implementations."""

import logging

from polling_file_watcher.core.interfaces import IFileNotificationListener
from polling_file_watcher.models import FileRecord, WatchEventType

logger = logging.getLogger(__name__)


class LoggingFileListener(IFileNotificationListener):
    """
    Listener that reports every notification through ``logging``.

    Useful as a starting point or while wiring up a watcher; subclass and
    override the callbacks you care about.
    """

    def __init__(self, level: int = logging.INFO, logger_: logging.Logger | None = None):
        self.level = level
        self.logger = logger_ or logger

    def on_watch_event(
        self,
        event_type: WatchEventType,
        record: FileRecord,
        previous: FileRecord | None = None,
    ) -> None:
        kind = "directory" if record.is_directory else "file"
        if previous is not None:
            self.logger.log(
                self.level,
                "%s %s: %s (mtime %d -> %d)",
                event_type.value,
                kind,
                record.path,
                previous.last_modified_ns,
                record.last_modified_ns,
            )
        else:
            self.logger.log(self.level, "%s %s: %s", event_type.value, kind, record.path)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(logger={self.logger.name!r})"
