from collections.abc import Iterator

from driftguard.ingestion.base import BaseIngestionChannel
from driftguard.ingestion.cloud_client import BaseCloudStorageClient, CloudProvider
from driftguard.ingestion.models import FileReference, UploadMethod
from driftguard.logging.logger import Log
from driftguard.parsing.sniffer import SUPPORTED_EXTENSIONS


class CloudStorageChannel(BaseIngestionChannel):
    """Supported files listed from a connected cloud storage provider."""

    method = UploadMethod.CLOUD_STORAGE

    def __init__(self, provider: CloudProvider | str, client: BaseCloudStorageClient) -> None:
        self._provider = provider
        self._client = client

    def produce_references(self) -> Iterator[FileReference]:
        provider = (
            self._provider
            if isinstance(self._provider, CloudProvider)
            else CloudProvider.parse(self._provider)
        )
        files = self._client.list_files(provider, sorted(SUPPORTED_EXTENSIONS))
        Log.info(f"Found {len(files)} compatible files in {provider.value}")
        for cloud_file in files:
            yield FileReference(
                name=cloud_file.name,
                location=cloud_file.download_url,
                source=self.method,
                size_bytes=cloud_file.size_bytes,
                metadata={
                    "provider": provider.value,
                    "cloud_file_id": cloud_file.id,
                    "mime_type": cloud_file.mime_type,
                },
            )
