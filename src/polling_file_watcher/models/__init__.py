"""Data models and schemas for the polling file watcher."""

from polling_file_watcher.models.events import DiffResult, DispatchReport, WatchEventType
from polling_file_watcher.models.exceptions import (
    BaseError,
    ConfigurationError,
    MonitoringError,
    NotFoundError,
)
from polling_file_watcher.models.file_record import FileRecord, is_backup_path

__all__ = [
    "FileRecord",
    "is_backup_path",
    "DiffResult",
    "DispatchReport",
    "WatchEventType",
    "BaseError",
    "ConfigurationError",
    "MonitoringError",
    "NotFoundError",
]
