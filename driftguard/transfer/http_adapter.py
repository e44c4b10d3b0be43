import asyncio
from pathlib import Path

import httpx

from driftguard.ingestion.models import FileReference
from driftguard.transfer.base import BaseTransferService
from driftguard.transfer.exceptions import TransferError
from driftguard.transfer.local_adapter import staged_path
from driftguard.transfer.models import ProgressCallback, TransferHandle


class HttpTransferService(BaseTransferService):
    """Downloads http(s) references into the staging directory.

    A download that fails or is cancelled part way is removed from staging.
    """

    def __init__(
        self,
        staging_dir: Path,
        *,
        timeout_seconds: int,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._staging_dir = staging_dir
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    async def upload(
        self,
        ref: FileReference,
        on_progress: ProgressCallback | None = None,
    ) -> TransferHandle:
        target = staged_path(self._staging_dir, ref.name)
        received = 0
        try:
            self._staging_dir.mkdir(parents=True, exist_ok=True)
            async with httpx.AsyncClient(
                timeout=self._timeout_seconds,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                async with client.stream("GET", ref.location) as response:
                    response.raise_for_status()
                    total = int(response.headers.get("Content-Length") or 0)
                    with target.open("wb") as dst:
                        async for chunk in response.aiter_bytes():
                            dst.write(chunk)
                            received += len(chunk)
                            if on_progress is not None and total:
                                on_progress(min(received / total, 1.0))
        except httpx.HTTPStatusError as exc:
            target.unlink(missing_ok=True)
            raise TransferError(
                f"Download of '{ref.location}' failed with status {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            target.unlink(missing_ok=True)
            raise TransferError(f"Download of '{ref.location}' failed: {exc}") from exc
        except OSError as exc:
            target.unlink(missing_ok=True)
            raise TransferError(f"Cannot stage '{ref.name}': {exc}") from exc
        except asyncio.CancelledError:
            target.unlink(missing_ok=True)
            raise
        if on_progress is not None:
            on_progress(1.0)
        return TransferHandle(path=target, size_bytes=received)
