"""
Data models for change events and per-cycle diff results.

A DiffResult is produced once per scan cycle, handed to the dispatcher,
and then used to build the monitored set for the next cycle.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field

from polling_file_watcher.models.file_record import FileRecord


class WatchEventType(str, Enum):
    """Kinds of change reported to listeners."""

    CREATE = "create"
    MODIFY = "modify"
    DELETE = "delete"


class DiffResult(BaseModel):
    """
    Classification of one fresh scan against the monitored set.

    ``modified`` holds ``(old, new)`` pairs; ``unchanged`` holds the
    previously monitored records carried forward as-is.
    """

    created: list[FileRecord] = Field(default_factory=list, description="Records with no prior match")
    modified: list[tuple[FileRecord, FileRecord]] = Field(
        default_factory=list, description="(old, new) pairs whose modification time changed"
    )
    deleted: list[FileRecord] = Field(default_factory=list, description="Prior records missing from the scan")
    unchanged: list[FileRecord] = Field(default_factory=list, description="Prior records with identical timestamps")

    model_config = ConfigDict(frozen=True)

    @computed_field
    @property
    def change_count(self) -> int:
        """Number of created, modified and deleted records."""
        return len(self.created) + len(self.modified) + len(self.deleted)

    @property
    def has_changes(self) -> bool:
        """Whether anything other than unchanged records was classified."""
        return self.change_count > 0

    def carried_forward(self) -> list[FileRecord]:
        """Records forming the monitored set for the next cycle."""
        return [*self.unchanged, *(new for _, new in self.modified), *self.created]

    def __str__(self) -> str:
        return (
            f"DiffResult(created={len(self.created)}, modified={len(self.modified)}, "
            f"deleted={len(self.deleted)}, unchanged={len(self.unchanged)})"
        )


class DispatchReport(BaseModel):
    """Delivery counts for the notifications of one dispatch."""

    delivered: int = Field(default=0, ge=0, description="Listener calls that returned normally")
    failed: int = Field(default=0, ge=0, description="Listener calls that raised")
    errors: list[str] = Field(default_factory=list, description="One message per failed listener call")

    def record_delivery(self) -> None:
        self.delivered += 1

    def record_failure(self, message: str) -> None:
        self.failed += 1
        self.errors.append(message)

    def __str__(self) -> str:
        return f"DispatchReport(delivered={self.delivered}, failed={self.failed})"
