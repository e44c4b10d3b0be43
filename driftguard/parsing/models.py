from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class ParsedModel:
    """A model artifact whose format has been validated."""

    name: str
    version: str
    framework: str
    format: str
    input_features: tuple[str, ...]
    output_labels: tuple[str, ...]
    path: Path
    size_bytes: int


@dataclass(frozen=True)
class ParsedDataset:
    """Numeric rows read from a dataset file."""

    name: str
    format: str
    columns: tuple[str, ...]
    rows: list[tuple[float, ...]] = field(default_factory=list)
    has_header: bool = False
    skipped_rows: int = 0

    @property
    def column_count(self) -> int:
        return len(self.columns)
