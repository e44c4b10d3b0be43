from dataclasses import dataclass
from datetime import datetime


@dataclass
class ModelRecord:
    """Represents a row from the ml_models table."""

    id: str
    name: str
    version: str
    framework: str
    input_features: list[str]
    output_labels: list[str]
    is_active: bool
    created_at: datetime | None = None
