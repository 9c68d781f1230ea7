"""
Monitoring package for polling-based change detection.

This package provides the components that scan registered directory
trees, compare each scan with the previous one, and notify listeners
when files and directories are created, modified, or deleted.
"""

from polling_file_watcher.models import DispatchReport
from .dispatcher import EventDispatcher
from .file_watcher import FileWatcher
from .listeners import LoggingFileListener
from .monitoring_coordinator import MonitoringCoordinator
from .registry import DirectoryRegistry, is_within
from .scanner import FileScanner
from .scheduler import CycleScheduler, SchedulerState
from .snapshot_differ import SnapshotDiffer

__all__ = [
    "CycleScheduler",
    "DirectoryRegistry",
    "DispatchReport",
    "EventDispatcher",
    "FileScanner",
    "FileWatcher",
    "LoggingFileListener",
    "MonitoringCoordinator",
    "SchedulerState",
    "SnapshotDiffer",
    "is_within",
]
