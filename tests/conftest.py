"""Shared fixtures for the polling file watcher tests."""

import os
import threading
from pathlib import Path

import pytest
from polling_file_watcher.core import IFileNotificationListener
from polling_file_watcher.models import FileRecord, WatchEventType


class RecordingListener(IFileNotificationListener):
    """Listener that remembers every notification it receives."""

    def __init__(self):
        self.events: list[tuple[WatchEventType, FileRecord, FileRecord | None]] = []
        self.received = threading.Event()

    def on_watch_event(self, event_type, record, previous=None):
        self.events.append((event_type, record, previous))
        self.received.set()

    def events_for(self, path: str | Path) -> list[tuple[WatchEventType, FileRecord, FileRecord | None]]:
        return [event for event in self.events if event[1].path == str(path)]

    def kinds_for(self, path: str | Path) -> list[WatchEventType]:
        return [event_type for event_type, _, _ in self.events_for(path)]

    def paths(self, event_type: WatchEventType) -> set[str]:
        return {record.path for kind, record, _ in self.events if kind is event_type}


def set_mtime_ns(path: Path, mtime_ns: int) -> None:
    """Force a deterministic modification time."""
    os.utime(path, ns=(mtime_ns, mtime_ns))


@pytest.fixture
def set_mtime():
    """Provide a helper that forces a file's modification time."""
    return set_mtime_ns


@pytest.fixture
def recording_listener():
    """Create a listener that records notifications."""
    return RecordingListener()


@pytest.fixture
def listener_factory():
    """Create independent recording listeners on demand."""
    return RecordingListener


@pytest.fixture
def watched_dir(tmp_path):
    """Create a resolved directory to watch."""
    directory = tmp_path / "watched"
    directory.mkdir()
    return directory.resolve()
