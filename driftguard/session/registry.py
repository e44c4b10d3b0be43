import threading
import uuid
from collections.abc import Callable
from dataclasses import replace

from driftguard.ingestion.models import FileReference, format_file_size
from driftguard.logging.logger import Log
from driftguard.parsing.sniffer import is_model_file
from driftguard.processor.exceptions import ErrorKind
from driftguard.processor.models import ALLOWED_TRANSITIONS, FileStatus, UploadedFile
from driftguard.session.exceptions import (
    FileInFlightError,
    FileNotFoundInRegistryError,
    InvalidTransitionError,
)

Listener = Callable[[], None]


class UploadedFileRegistry:
    """Single source of truth for the files of one upload session.

    Each record has its own lock; the index lock only guards membership and
    ingestion order, so updates to unrelated files never contend.
    """

    def __init__(self) -> None:
        self._records: dict[str, UploadedFile] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._order: list[str] = []
        self._index_lock = threading.Lock()
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        """Call listener after every mutation."""
        self._listeners.append(listener)

    def register(self, ref: FileReference) -> str:
        """Create a QUEUED record for a reference and return its new id."""
        file_id = str(uuid.uuid4())
        record = UploadedFile(
            id=file_id,
            name=ref.name,
            size_display=format_file_size(ref.size_bytes),
            is_model=is_model_file(ref.name),
            source=ref.source,
            reference=ref,
        )
        with self._index_lock:
            self._records[file_id] = record
            self._locks[file_id] = threading.Lock()
            self._order.append(file_id)
        Log.debug(f"Registered file {file_id} ({ref.name}) from {ref.source.value}")
        self._notify()
        return file_id

    def get(self, file_id: str) -> UploadedFile:
        """Return the current snapshot of a record.

        Raises:
            FileNotFoundInRegistryError: if no such file is registered.
        """
        record = self._records.get(file_id)
        if record is None:
            raise FileNotFoundInRegistryError(f"File {file_id} not found")
        return record

    def list(self) -> list[UploadedFile]:
        """Return all records in ingestion order."""
        with self._index_lock:
            return [self._records[file_id] for file_id in self._order]

    def update_status(
        self,
        file_id: str,
        new_status: FileStatus,
        *,
        error_kind: ErrorKind | None = None,
        error_message: str | None = None,
    ) -> UploadedFile:
        """Move a record to new_status, resetting its phase progress.

        Raises:
            FileNotFoundInRegistryError: if no such file is registered.
            InvalidTransitionError: if the lifecycle does not allow the move.
        """
        with self._lock_for(file_id):
            current = self.get(file_id)
            if new_status not in ALLOWED_TRANSITIONS[current.status]:
                raise InvalidTransitionError(
                    f"File {file_id} cannot move from {current.status.value} to {new_status.value}"
                )
            updated = replace(
                current,
                status=new_status,
                progress=1.0 if new_status.is_terminal else 0.0,
                error_kind=error_kind,
                error_message=error_message,
            )
            self._records[file_id] = updated
        Log.info(f"File {file_id} ({current.name}): {current.status.value} -> {new_status.value}")
        self._notify()
        return updated

    def update_progress(self, file_id: str, fraction: float) -> UploadedFile:
        """Record progress within the current phase. Ignored once terminal.

        Raises:
            FileNotFoundInRegistryError: if no such file is registered.
        """
        with self._lock_for(file_id):
            current = self.get(file_id)
            if not current.status.is_in_flight:
                return current
            updated = replace(current, progress=max(0.0, min(1.0, fraction)))
            self._records[file_id] = updated
        self._notify()
        return updated

    def set_format(self, file_id: str, fmt: str) -> UploadedFile:
        """Record the detected format. Only the first call takes effect."""
        with self._lock_for(file_id):
            current = self.get(file_id)
            if current.format is not None:
                return current
            updated = replace(current, format=fmt)
            self._records[file_id] = updated
        self._notify()
        return updated

    def remove(self, file_id: str) -> UploadedFile:
        """Drop a queued, processed or failed record.

        Raises:
            FileNotFoundInRegistryError: if no such file is registered.
            FileInFlightError: if the file is uploading or processing.
        """
        with self._lock_for(file_id):
            current = self.get(file_id)
            if current.status.is_in_flight:
                raise FileInFlightError(
                    f"File {file_id} is {current.status.value} and cannot be removed yet"
                )
            with self._index_lock:
                del self._records[file_id]
                self._order.remove(file_id)
                self._locks.pop(file_id, None)
        Log.info(f"Removed file {file_id} ({current.name})")
        self._notify()
        return current

    def clear(self) -> None:
        with self._index_lock:
            self._records.clear()
            self._locks.clear()
            self._order.clear()
        self._notify()

    def _lock_for(self, file_id: str) -> threading.Lock:
        lock = self._locks.get(file_id)
        if lock is None:
            raise FileNotFoundInRegistryError(f"File {file_id} not found")
        return lock

    def _notify(self) -> None:
        for listener in self._listeners:
            listener()
