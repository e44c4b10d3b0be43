from abc import ABC, abstractmethod
from collections.abc import Iterator

from driftguard.ingestion.models import FileReference, UploadMethod


class BaseIngestionChannel(ABC):
    """Contract for every ingestion channel."""

    method: UploadMethod

    @abstractmethod
    def produce_references(self) -> Iterator[FileReference]:
        """Lazily yield one FileReference per file the channel supplies.

        Raises:
            IngestionError: if the channel as a whole cannot resolve its sources.
        """
