import asyncio
import uuid
from pathlib import Path

from driftguard.ingestion.models import FileReference
from driftguard.transfer.base import BaseTransferService
from driftguard.transfer.exceptions import TransferError
from driftguard.transfer.models import ProgressCallback, TransferHandle


def staged_path(staging_dir: Path, name: str) -> Path:
    """Build a collision-free staging path: {staging_dir}/{hex}_{name}"""
    return staging_dir / f"{uuid.uuid4().hex}_{name}"


class LocalTransferService(BaseTransferService):
    """Copies a local file into the staging directory chunk by chunk.

    A copy that fails or is cancelled part way is removed from staging.
    """

    def __init__(self, staging_dir: Path, chunk_size: int = 64 * 1024) -> None:
        self._staging_dir = staging_dir
        self._chunk_size = chunk_size

    async def upload(
        self,
        ref: FileReference,
        on_progress: ProgressCallback | None = None,
    ) -> TransferHandle:
        source = Path(ref.location)
        target = staged_path(self._staging_dir, ref.name)
        copied = 0
        try:
            total = source.stat().st_size
            self._staging_dir.mkdir(parents=True, exist_ok=True)
            with source.open("rb") as src, target.open("wb") as dst:
                while True:
                    chunk = await asyncio.to_thread(src.read, self._chunk_size)
                    if not chunk:
                        break
                    dst.write(chunk)
                    copied += len(chunk)
                    if on_progress is not None and total:
                        on_progress(copied / total)
        except OSError as exc:
            target.unlink(missing_ok=True)
            raise TransferError(f"Cannot read '{ref.location}': {exc}") from exc
        except asyncio.CancelledError:
            target.unlink(missing_ok=True)
            raise
        if on_progress is not None:
            on_progress(1.0)
        return TransferHandle(path=target, size_bytes=copied)
