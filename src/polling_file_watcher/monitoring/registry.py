"""
Directory registry for the polling file watcher.

Tracks which directory trees are scanned (the roots) and which listeners
are registered against which directories. No root is ever an ancestor of
another: registering a subdirectory of a root is absorbed by that root,
and registering a parent of existing roots replaces them.
"""

import logging
import threading
from pathlib import Path

from polling_file_watcher.core.interfaces import IFileNotificationListener
from polling_file_watcher.models import NotFoundError

logger = logging.getLogger(__name__)


def is_within(path: str, root: str) -> bool:
    """
    Check whether ``path`` is ``root`` itself or lies beneath it.

    The comparison works on whole path segments, so ``/data`` does not
    contain ``/database/readme``.
    """
    return Path(path).is_relative_to(root)


class DirectoryRegistry:
    """
    Thread-safe set of watched roots and their listeners.

    All reads and writes go through one reentrant lock. Callers that need a
    consistent view for a whole scan cycle should take ``snapshot()`` once
    instead of querying roots and registrations separately.
    """

    def __init__(self, prune_unwatched_roots: bool = False):
        """
        Initialize the registry.

        Args:
            prune_unwatched_roots: Drop roots that no longer have any listener
                at or beneath them after an unregistration
        """
        self.prune_unwatched_roots = prune_unwatched_roots

        self._lock = threading.RLock()
        self._roots: list[str] = []
        self._listeners: dict[str, list[IFileNotificationListener]] = {}

    def register(self, listener: IFileNotificationListener, directory_path: str | Path) -> str:
        """
        Register a listener for changes under a directory.

        Args:
            listener: Listener to notify
            directory_path: Directory to watch

        Returns:
            The normalized absolute path the listener was registered against

        Raises:
            NotFoundError: If the path is blank, missing, or not a directory
        """
        directory = self._resolve_existing_directory(directory_path)

        with self._lock:
            listeners = self._listeners.setdefault(directory, [])
            if listener not in listeners:
                listeners.append(listener)

            covered = False
            for root in list(self._roots):
                if root == directory or is_within(directory, root):
                    covered = True
                elif is_within(root, directory):
                    self._roots.remove(root)
                    logger.info("Root %s superseded by broader root %s", root, directory)

            if not covered:
                self._roots.append(directory)
                logger.info("Added watched root %s", directory)
            else:
                logger.debug("Directory %s already covered by an existing root", directory)

        return directory

    def unregister(self, listener: IFileNotificationListener, directory_path: str | Path) -> None:
        """
        Remove a listener's registration for one exact directory.

        Roots stay under scan unless ``prune_unwatched_roots`` is enabled.

        Args:
            listener: Listener to remove
            directory_path: Directory the listener was registered against
        """
        if listener is None or directory_path is None or not str(directory_path).strip():
            return

        directory = str(Path(directory_path).expanduser().resolve())

        with self._lock:
            listeners = self._listeners.get(directory)
            if not listeners or listener not in listeners:
                logger.debug("No registration of %r for %s", listener, directory)
                return

            listeners.remove(listener)
            if not listeners:
                del self._listeners[directory]
            logger.info("Unregistered listener %r from %s", listener, directory)

            if self.prune_unwatched_roots:
                self._rebuild_roots()

    def _rebuild_roots(self) -> None:
        """Recompute roots as the outermost directories that still have listeners."""
        roots: list[str] = []
        for directory in sorted(self._listeners, key=lambda p: len(Path(p).parts)):
            if not any(is_within(directory, root) for root in roots):
                roots.append(directory)

        for root in self._roots:
            if root not in roots:
                logger.info("Removed watched root %s (no listeners left)", root)

        self._roots = roots

    def _resolve_existing_directory(self, directory_path: str | Path) -> str:
        if directory_path is None or not str(directory_path).strip():
            raise NotFoundError("Directory path must not be blank", path=None, operation="register")

        path = Path(directory_path).expanduser()
        if not path.exists():
            raise NotFoundError(f"Directory does not exist: {path}", path=str(path), operation="register")
        if not path.is_dir():
            raise NotFoundError(f"Path is not a directory: {path}", path=str(path), operation="register")

        return str(path.resolve())

    def snapshot(self) -> tuple[tuple[str, ...], tuple[tuple[str, IFileNotificationListener], ...]]:
        """
        Copy the roots and registrations under a single lock acquisition.

        Returns:
            ``(roots, registrations)`` where registrations are
            ``(directory, listener)`` pairs in registration order
        """
        with self._lock:
            roots = tuple(self._roots)
            registrations = tuple(
                (directory, listener) for directory, listeners in self._listeners.items() for listener in listeners
            )
        return roots, registrations

    def get_roots(self) -> list[str]:
        """Get the directories currently scanned."""
        with self._lock:
            return list(self._roots)

    def get_registrations(self) -> list[tuple[str, IFileNotificationListener]]:
        """Get ``(directory, listener)`` pairs in registration order."""
        return list(self.snapshot()[1])

    def get_listener_count(self) -> int:
        """Get the number of listener registrations."""
        with self._lock:
            return sum(len(listeners) for listeners in self._listeners.values())

    def clear(self) -> None:
        """Remove every root and registration."""
        with self._lock:
            self._roots.clear()
            self._listeners.clear()
