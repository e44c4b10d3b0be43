from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from driftguard.ingestion.exceptions import UnknownCloudProviderError


class CloudProvider(str, Enum):
    GOOGLE_DRIVE = "google_drive"
    DROPBOX = "dropbox"
    ONEDRIVE = "onedrive"

    @classmethod
    def parse(cls, name: str) -> "CloudProvider":
        try:
            return cls(name.strip().lower())
        except ValueError as exc:
            raise UnknownCloudProviderError(f"Unknown cloud provider: {name}") from exc


@dataclass(frozen=True)
class CloudFile:
    """A file listed by a cloud storage provider."""

    id: str
    name: str
    size_bytes: int
    mime_type: str
    download_url: str
    provider: CloudProvider


class BaseCloudStorageClient(ABC):
    """Contract for provider listing clients. Authentication happens elsewhere."""

    @abstractmethod
    def list_files(
        self,
        provider: CloudProvider,
        extensions: Iterable[str],
    ) -> list[CloudFile]:
        """Return the provider's files whose names end with one of extensions."""


class ExampleCloudStorageClient(BaseCloudStorageClient):
    """Returns a fixed listing. No network calls."""

    DEMO_FILES: ClassVar[list[tuple[str, str, int, str, str]]] = [
        (
            "demo_model_1",
            "drift_model_v1.tflite",
            2_500_000,
            "application/octet-stream",
            "https://example.com/model.tflite",
        ),
        (
            "demo_data_1",
            "training_data.csv",
            1_500_000,
            "text/csv",
            "https://example.com/data.csv",
        ),
    ]

    def list_files(
        self,
        provider: CloudProvider,
        extensions: Iterable[str],
    ) -> list[CloudFile]:
        wanted = tuple(e.lower() for e in extensions)
        return [
            CloudFile(
                id=file_id,
                name=name,
                size_bytes=size,
                mime_type=mime,
                download_url=url,
                provider=provider,
            )
            for file_id, name, size, mime, url in self.DEMO_FILES
            if name.lower().endswith(wanted)
        ]
