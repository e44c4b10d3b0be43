from collections.abc import Iterator, Sequence
from urllib.parse import urlsplit

from driftguard.ingestion.base import BaseIngestionChannel
from driftguard.ingestion.exceptions import InvalidUrlError
from driftguard.ingestion.models import FileReference, UploadMethod


def file_name_from_url(url: str) -> str:
    """Return the last path segment of a URL, without its query string."""
    if not url.startswith(("http://", "https://")):
        raise InvalidUrlError(f"Invalid URL '{url}'. Must start with http:// or https://")
    name = urlsplit(url).path.rsplit("/", 1)[-1]
    if not name:
        raise InvalidUrlError(f"Could not extract file name from URL '{url}'")
    return name


class UrlImportChannel(BaseIngestionChannel):
    """Files imported by URL. Nothing is downloaded until transfer."""

    method = UploadMethod.URL_IMPORT

    def __init__(self, urls: Sequence[str]) -> None:
        self._urls = [u.strip() for u in urls]

    def produce_references(self) -> Iterator[FileReference]:
        for url in self._urls:
            yield FileReference(
                name=file_name_from_url(url),
                location=url,
                source=self.method,
                metadata={"source": "url", "url": url},
            )
