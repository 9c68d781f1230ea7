"""
Data model for a single observed filesystem entry.

A FileRecord captures the metadata of one file or directory at the moment
it was observed. Records are immutable and compared by path only, so two
records for the same path with different metadata represent the same entry
in two different states.
"""

import os
import stat
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, computed_field

from polling_file_watcher.models.exceptions import NotFoundError

_BACKUP_SUFFIX = "BAK"
_TILDE_SUFFIX = "~"


def is_backup_path(path: str) -> bool:
    """Check whether a path names an editor or tool backup file."""
    return path.endswith(_TILDE_SUFFIX) or path.upper().endswith(_BACKUP_SUFFIX)


class FileRecord(BaseModel):
    """
    Immutable snapshot of one filesystem entry's metadata.

    Equality and hashing use ``path`` alone.
    """

    path: str = Field(..., min_length=1, description="Absolute path to the entry")
    parent_path: str | None = Field(None, description="Absolute path of the containing directory")
    short_name: str = Field(..., description="Final path component")
    last_modified_ns: int = Field(..., description="Modification time in nanoseconds since the epoch")
    size_bytes: int = Field(default=0, ge=0, description="Size reported by stat")
    is_directory: bool = Field(default=False, description="Whether the entry is a directory")
    is_hidden: bool = Field(default=False, description="Whether the entry is hidden")
    is_readable: bool = Field(default=False, description="Whether the process can read the entry")
    is_writable: bool = Field(default=False, description="Whether the process can write the entry")
    is_executable: bool = Field(default=False, description="Whether the process can execute the entry")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_path(cls, path: str | Path) -> "FileRecord":
        """
        Observe a filesystem entry and build its record.

        Args:
            path: Path to the file or directory

        Returns:
            FileRecord describing the entry as it is right now

        Raises:
            NotFoundError: If the entry does not exist
        """
        absolute = os.path.abspath(os.fspath(path))
        try:
            st = os.stat(absolute)
        except (FileNotFoundError, NotADirectoryError) as e:
            raise NotFoundError(
                f"Provided path is an invalid location: {absolute}",
                path=absolute,
                operation="observe",
                underlying_error=e,
            ) from e

        parent = os.path.dirname(absolute)
        short_name = os.path.basename(absolute)

        return cls(
            path=absolute,
            parent_path=parent if parent != absolute else None,
            short_name=short_name,
            last_modified_ns=st.st_mtime_ns,
            size_bytes=st.st_size,
            is_directory=stat.S_ISDIR(st.st_mode),
            is_hidden=_is_hidden(short_name, st),
            is_readable=os.access(absolute, os.R_OK),
            is_writable=os.access(absolute, os.W_OK),
            is_executable=os.access(absolute, os.X_OK),
        )

    @computed_field
    @property
    def is_backup(self) -> bool:
        """Whether the path ends with ``~`` or, case-insensitively, ``BAK``."""
        return is_backup_path(self.path)

    @property
    def is_file(self) -> bool:
        """Whether the entry is anything other than a directory."""
        return not self.is_directory

    @property
    def modified_at(self) -> datetime:
        """Modification time as an aware UTC datetime."""
        return datetime.fromtimestamp(self.last_modified_ns / 1_000_000_000, tz=UTC)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FileRecord):
            return NotImplemented
        return self.path == other.path

    def __hash__(self) -> int:
        return hash(self.path)

    def __str__(self) -> str:
        kind = "dir" if self.is_directory else "file"
        return f"FileRecord({kind}: {self.path})"


def _is_hidden(short_name: str, st: os.stat_result) -> bool:
    if short_name.startswith("."):
        return True
    # Windows only
    attributes = getattr(st, "st_file_attributes", 0)
    return bool(attributes & getattr(stat, "FILE_ATTRIBUTE_HIDDEN", 0))
