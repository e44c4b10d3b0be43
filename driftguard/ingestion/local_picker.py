from collections.abc import Iterator, Sequence
from pathlib import Path

from driftguard.ingestion.base import BaseIngestionChannel
from driftguard.ingestion.models import FileReference, UploadMethod


def reference_for_path(path: Path, source: UploadMethod) -> FileReference:
    """Build a reference for a local path.

    A path that is not a regular file gets a reference without a size; its
    transfer fails for that file alone.
    """
    return FileReference(
        name=path.name,
        location=str(path),
        source=source,
        size_bytes=path.stat().st_size if path.is_file() else None,
    )


class LocalFilePickerChannel(BaseIngestionChannel):
    """Files picked one by one from the local filesystem."""

    method = UploadMethod.LOCAL_FILE

    def __init__(self, paths: Sequence[Path | str]) -> None:
        self._paths = [Path(p) for p in paths]

    def produce_references(self) -> Iterator[FileReference]:
        for path in self._paths:
            yield reference_for_path(path, self.method)
