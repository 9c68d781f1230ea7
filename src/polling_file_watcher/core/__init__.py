"""Core contracts shared by the watcher components."""

from polling_file_watcher.core.interfaces import IFileNotificationListener, IFileScanner

__all__ = [
    "IFileNotificationListener",
    "IFileScanner",
]
