from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

ProgressCallback = Callable[[float], None]


@dataclass(frozen=True)
class TransferHandle:
    """Where a transferred file's bytes ended up."""

    path: Path
    size_bytes: int

    def discard(self) -> None:
        """Delete the staged copy. Already gone is fine."""
        self.path.unlink(missing_ok=True)
