from dataclasses import dataclass
from enum import Enum

from driftguard.ingestion.models import FileReference, UploadMethod
from driftguard.processor.exceptions import ErrorKind


class FileStatus(str, Enum):
    QUEUED = "QUEUED"
    UPLOADING = "UPLOADING"
    PROCESSING = "PROCESSING"
    PROCESSED = "PROCESSED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (FileStatus.PROCESSED, FileStatus.FAILED)

    @property
    def is_in_flight(self) -> bool:
        return self in (FileStatus.UPLOADING, FileStatus.PROCESSING)


ALLOWED_TRANSITIONS: dict[FileStatus, frozenset[FileStatus]] = {
    FileStatus.QUEUED: frozenset({FileStatus.UPLOADING}),
    FileStatus.UPLOADING: frozenset({FileStatus.PROCESSING, FileStatus.FAILED}),
    FileStatus.PROCESSING: frozenset({FileStatus.PROCESSED, FileStatus.FAILED}),
    FileStatus.PROCESSED: frozenset(),
    FileStatus.FAILED: frozenset(),
}


@dataclass(frozen=True)
class UploadedFile:
    """Snapshot of one ingested file's lifecycle record.

    Records are immutable; the registry swaps in a new snapshot on every
    mutation, so a reader always holds a consistent view.
    """

    id: str
    name: str
    size_display: str
    is_model: bool
    source: UploadMethod
    reference: FileReference
    status: FileStatus = FileStatus.QUEUED
    progress: float = 0.0  # fraction of the current phase
    format: str | None = None
    error_kind: ErrorKind | None = None
    error_message: str | None = None

    @property
    def processed(self) -> bool:
        return self.status is FileStatus.PROCESSED
