"""Overall progress derived from the registry's file records."""

from collections.abc import Sequence
from dataclasses import dataclass

from driftguard.processor.models import FileStatus, UploadedFile

# Per-file progress bands. An uploading file is never exactly 0 and a
# processing file never exactly 1, so the aggregate hits those bounds only
# when every file is queued or every file is terminal.
_UPLOAD_START = 0.05
_UPLOAD_END = 0.5
_PROCESS_END = 0.95


@dataclass(frozen=True)
class ProgressSnapshot:
    value: float = 0.0
    is_processing: bool = False

    @property
    def should_display(self) -> bool:
        """Idle (0) and complete (1) are not shown."""
        return 0.0 < self.value < 1.0


def file_progress(record: UploadedFile) -> float:
    if record.status is FileStatus.QUEUED:
        return 0.0
    if record.status is FileStatus.UPLOADING:
        return _UPLOAD_START + (_UPLOAD_END - _UPLOAD_START) * record.progress
    if record.status is FileStatus.PROCESSING:
        return _UPLOAD_END + (_PROCESS_END - _UPLOAD_END) * record.progress
    return 1.0


def compute_overall_progress(files: Sequence[UploadedFile]) -> ProgressSnapshot:
    """Mean per-file progress plus the processing/uploading phase flag."""
    if not files:
        return ProgressSnapshot()
    value = sum(file_progress(f) for f in files) / len(files)
    statuses = {f.status for f in files}
    is_processing = FileStatus.PROCESSING in statuses and FileStatus.UPLOADING not in statuses
    return ProgressSnapshot(value=max(0.0, min(1.0, value)), is_processing=is_processing)
