from collections.abc import Sequence
from typing import ClassVar

from driftguard.config.settings import Settings
from driftguard.ingestion.base import BaseIngestionChannel
from driftguard.ingestion.cloud_client import BaseCloudStorageClient, ExampleCloudStorageClient
from driftguard.ingestion.cloud_connector import CloudStorageChannel
from driftguard.ingestion.drop_zone import DropZoneChannel
from driftguard.ingestion.local_picker import LocalFilePickerChannel
from driftguard.ingestion.models import UploadMethod
from driftguard.ingestion.url_importer import UrlImportChannel


class IngestionChannelFactory:
    """Creates the channel for an upload method."""

    CLOUD_CLIENTS: ClassVar[dict[str, type[BaseCloudStorageClient]]] = {
        "example": ExampleCloudStorageClient,
    }

    @classmethod
    def create(
        cls,
        method: UploadMethod,
        sources: Sequence[str],
        settings: Settings,
    ) -> BaseIngestionChannel:
        """Build a channel.

        For CLOUD_STORAGE, sources holds the provider name as its only item.
        """
        if method is UploadMethod.LOCAL_FILE:
            return LocalFilePickerChannel(sources)
        if method is UploadMethod.DRAG_DROP:
            return DropZoneChannel(sources)
        if method is UploadMethod.URL_IMPORT:
            return UrlImportChannel(sources)
        if len(sources) != 1:
            raise ValueError("Cloud storage ingestion takes exactly one provider name")
        return CloudStorageChannel(sources[0], cls._cloud_client(settings))

    @classmethod
    def _cloud_client(cls, settings: Settings) -> BaseCloudStorageClient:
        name = settings.cloud_storage_provider.lower()
        client_cls = cls.CLOUD_CLIENTS.get(name)
        if client_cls is None:
            raise ValueError(
                f"Unknown cloud storage provider '{name}'. Choose from: {list(cls.CLOUD_CLIENTS)}"
            )
        return client_cls()
