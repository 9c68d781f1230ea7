"""Polling file watcher: change notification by periodic snapshot comparison."""

from polling_file_watcher.config import WatcherConfig
from polling_file_watcher.core import IFileNotificationListener
from polling_file_watcher.models import (
    BaseError,
    DiffResult,
    FileRecord,
    MonitoringError,
    NotFoundError,
    WatchEventType,
)
from polling_file_watcher.monitoring import FileWatcher, LoggingFileListener

__version__ = "0.1.0"

__all__ = [
    "FileWatcher",
    "WatcherConfig",
    "IFileNotificationListener",
    "LoggingFileListener",
    "FileRecord",
    "DiffResult",
    "WatchEventType",
    "BaseError",
    "MonitoringError",
    "NotFoundError",
]
