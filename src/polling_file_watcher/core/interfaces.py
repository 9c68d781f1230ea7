"""
Abstract interfaces for the polling file watcher.

These interfaces define the contracts for notification sinks and scanners,
enabling extensibility and dependency injection for testing.
"""

from abc import ABC, abstractmethod

from polling_file_watcher.models import FileRecord, WatchEventType


class IFileNotificationListener(ABC):
    """
    Interface for consumers of file change notifications.

    Only ``on_watch_event`` must be implemented. The six granular callbacks
    delegate to it by default and can be overridden individually when a
    listener wants to treat files and directories differently.

    Callbacks run synchronously on the watcher's scan thread, so a slow
    listener delays detection of every later change. Keep them short and
    hand heavy work off elsewhere.
    """

    @abstractmethod
    def on_watch_event(
        self,
        event_type: WatchEventType,
        record: FileRecord,
        previous: FileRecord | None = None,
    ) -> None:
        """
        Handle any change notification.

        Args:
            event_type: Kind of change
            record: The entry as currently known (new state for modifications,
                last known state for deletions)
            previous: The prior state, only set for modifications
        """
        pass

    def on_create_file(self, record: FileRecord) -> None:
        """Called when a file appears."""
        self.on_watch_event(WatchEventType.CREATE, record)

    def on_create_directory(self, record: FileRecord) -> None:
        """Called when a directory appears."""
        self.on_watch_event(WatchEventType.CREATE, record)

    def on_modify_file(self, old_record: FileRecord, new_record: FileRecord) -> None:
        """Called when a file's modification time changes."""
        self.on_watch_event(WatchEventType.MODIFY, new_record, previous=old_record)

    def on_modify_directory(self, old_record: FileRecord, new_record: FileRecord) -> None:
        """Called when a directory's modification time changes."""
        self.on_watch_event(WatchEventType.MODIFY, new_record, previous=old_record)

    def on_delete_file(self, record: FileRecord) -> None:
        """Called when a file disappears."""
        self.on_watch_event(WatchEventType.DELETE, record)

    def on_delete_directory(self, record: FileRecord) -> None:
        """Called when a directory disappears."""
        self.on_watch_event(WatchEventType.DELETE, record)


class IFileScanner(ABC):
    """Interface for enumerating the entries beneath a root directory."""

    @abstractmethod
    def scan(self, root: str) -> list[FileRecord]:
        """
        Enumerate a root and every entry beneath it.

        Args:
            root: Absolute path of the directory to scan

        Returns:
            One record per entry, the root included. Entries that vanish
            while scanning are left out rather than raising.
        """
        pass
