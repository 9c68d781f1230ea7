"""
Recursive directory scanner for the polling file watcher.

Each scan is a full re-enumeration of a root. Its cost grows with the
number of entries beneath the root, and a scan slower than the configured
interval delays the next cycle.
"""

import logging
import os
from collections.abc import Callable
from pathlib import Path

from polling_file_watcher.core.interfaces import IFileScanner
from polling_file_watcher.models import FileRecord, NotFoundError

logger = logging.getLogger(__name__)


class FileScanner(IFileScanner):
    """
    Depth-first, pre-order filesystem scanner.

    A directory's record precedes the records of its contents, and siblings
    are visited in sorted name order, so the same tree always yields the
    same sequence. Symbolic links to directories are recorded but not
    followed.
    """

    def __init__(self, should_ignore: Callable[[str], bool] | None = None):
        """
        Initialize the scanner.

        Args:
            should_ignore: Optional predicate; matching entries are skipped,
                and matching directories are not descended into
        """
        self.should_ignore = should_ignore

    def scan(self, root: str) -> list[FileRecord]:
        """
        Enumerate a root and every entry beneath it.

        Args:
            root: Absolute path of the directory to scan

        Returns:
            One record per entry, the root first
        """
        records: list[FileRecord] = []

        root_record = self._observe(root)
        if root_record is None:
            logger.warning("Watched root %s no longer exists", root)
            return records

        records.append(root_record)
        if not root_record.is_directory:
            return records

        # Children are pushed in reverse so they pop in sorted order
        stack = list(reversed(self._list_children(root)))
        while stack:
            path, descend = stack.pop()

            record = self._observe(path)
            if record is None:
                continue
            records.append(record)

            if descend and record.is_directory:
                stack.extend(reversed(self._list_children(path)))

        logger.debug("Scanned %s: %d entries", root, len(records))
        return records

    def _observe(self, path: str) -> FileRecord | None:
        try:
            return FileRecord.from_path(path)
        except NotFoundError:
            logger.debug("Entry vanished before it could be observed: %s", path)
        except OSError as e:
            logger.debug("Could not stat %s: %s", path, e)
        return None

    def _list_children(self, directory: str) -> list[tuple[str, bool]]:
        """
        List a directory's children as ``(path, descend)`` pairs.

        ``descend`` is false for symbolic links so the walk cannot loop.
        """
        try:
            with os.scandir(directory) as entries:
                children = []
                for entry in entries:
                    if self.should_ignore and self.should_ignore(entry.path):
                        continue
                    try:
                        descend = not entry.is_symlink()
                    except OSError:
                        descend = False
                    children.append((entry.path, descend))
        except (FileNotFoundError, NotADirectoryError):
            logger.debug("Directory vanished while listing: %s", directory)
            return []
        except PermissionError as e:
            logger.warning("Cannot list directory %s: %s", directory, e)
            return []
        except OSError as e:
            logger.warning("Error listing directory %s: %s", directory, e)
            return []

        children.sort(key=lambda child: Path(child[0]).name)
        return children
