from dataclasses import dataclass, field
from enum import Enum


class UploadMethod(str, Enum):
    """The closed set of ways a file reference can enter a session."""

    LOCAL_FILE = "local_file"
    CLOUD_STORAGE = "cloud_storage"
    URL_IMPORT = "url_import"
    DRAG_DROP = "drag_drop"


@dataclass(frozen=True)
class FileReference:
    """A raw, not-yet-transferred pointer to a file produced by a channel."""

    name: str
    location: str  # filesystem path or http(s) URL
    source: UploadMethod
    size_bytes: int | None = None
    metadata: dict[str, str] = field(default_factory=dict)


def format_file_size(size_bytes: int | None) -> str:
    """Render a byte count the way it is shown next to an uploaded file."""
    if size_bytes is None:
        return "unknown"
    if size_bytes < 1024:
        return f"{size_bytes} B"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes // 1024} KB"
    if size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / (1024 * 1024):.2f} MB"
    return f"{size_bytes / (1024 * 1024 * 1024):.2f} GB"
