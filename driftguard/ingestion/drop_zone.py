from collections.abc import Iterator, Sequence
from pathlib import Path

from driftguard.ingestion.base import BaseIngestionChannel
from driftguard.ingestion.local_picker import reference_for_path
from driftguard.ingestion.models import FileReference, UploadMethod
from driftguard.logging.logger import Log
from driftguard.parsing.sniffer import is_supported


class DropZoneChannel(BaseIngestionChannel):
    """Items dropped onto the upload area.

    A dropped directory contributes the supported files directly inside it,
    in name order. Nested directories are not walked.
    """

    method = UploadMethod.DRAG_DROP

    def __init__(self, dropped: Sequence[Path | str]) -> None:
        self._dropped = [Path(p) for p in dropped]

    def produce_references(self) -> Iterator[FileReference]:
        for item in self._dropped:
            if item.is_dir():
                yield from self._expand_directory(item)
            else:
                yield reference_for_path(item, self.method)

    def _expand_directory(self, directory: Path) -> Iterator[FileReference]:
        children = sorted(p for p in directory.iterdir() if p.is_file())
        skipped = 0
        for child in children:
            if not is_supported(child.name):
                skipped += 1
                continue
            yield reference_for_path(child, self.method)
        if skipped:
            Log.debug(f"Drop zone skipped {skipped} unsupported files in {directory}")
