from driftguard.ingestion.models import FileReference
from driftguard.transfer.base import BaseTransferService
from driftguard.transfer.models import ProgressCallback, TransferHandle


class RoutingTransferService(BaseTransferService):
    """Sends http(s) locations to the remote adapter and everything else to the local one."""

    def __init__(self, local: BaseTransferService, remote: BaseTransferService) -> None:
        self._local = local
        self._remote = remote

    async def upload(
        self,
        ref: FileReference,
        on_progress: ProgressCallback | None = None,
    ) -> TransferHandle:
        if ref.location.startswith(("http://", "https://")):
            return await self._remote.upload(ref, on_progress)
        return await self._local.upload(ref, on_progress)
