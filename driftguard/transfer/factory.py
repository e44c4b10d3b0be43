from driftguard.config.settings import Settings
from driftguard.transfer.base import BaseTransferService
from driftguard.transfer.http_adapter import HttpTransferService
from driftguard.transfer.local_adapter import LocalTransferService
from driftguard.transfer.router import RoutingTransferService


class TransferServiceFactory:
    """Creates the transfer service used by the pipeline."""

    @classmethod
    def create(cls, settings: Settings) -> BaseTransferService:
        local = LocalTransferService(
            settings.staging_dir,
            chunk_size=settings.transfer_chunk_size_bytes,
        )
        remote = HttpTransferService(
            settings.staging_dir,
            timeout_seconds=settings.url_import_timeout_seconds,
        )
        return RoutingTransferService(local=local, remote=remote)
