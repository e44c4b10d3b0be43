from abc import ABC, abstractmethod

from driftguard.ingestion.models import FileReference
from driftguard.transfer.models import ProgressCallback, TransferHandle


class BaseTransferService(ABC):
    """Contract for all transfer adapters."""

    @abstractmethod
    async def upload(
        self,
        ref: FileReference,
        on_progress: ProgressCallback | None = None,
    ) -> TransferHandle:
        """Move the referenced bytes into the staging area.

        Args:
            ref: Reference produced by an ingestion channel.
            on_progress: Called with the transferred fraction in [0.0, 1.0].

        Returns:
            TransferHandle pointing at the staged copy.

        Raises:
            TransferError: on any failure.
        """
