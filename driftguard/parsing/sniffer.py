"""Extension-based classification of ingested files."""

from enum import Enum
from pathlib import PurePosixPath

MODEL_EXTENSIONS = frozenset({".tflite", ".onnx", ".h5", ".pb", ".pt", ".pth"})
DATA_EXTENSIONS = frozenset({".csv", ".json", ".txt"})
SUPPORTED_EXTENSIONS = MODEL_EXTENSIONS | DATA_EXTENSIONS


class FileKind(str, Enum):
    MODEL = "model"
    DATA = "data"
    UNSUPPORTED = "unsupported"


def extension_of(file_name: str) -> str:
    return PurePosixPath(file_name).suffix.lower()


def detect_kind(file_name: str) -> FileKind:
    extension = extension_of(file_name)
    if extension in MODEL_EXTENSIONS:
        return FileKind.MODEL
    if extension in DATA_EXTENSIONS:
        return FileKind.DATA
    return FileKind.UNSUPPORTED


def is_model_file(file_name: str) -> bool:
    return detect_kind(file_name) is FileKind.MODEL


def is_supported(file_name: str) -> bool:
    return extension_of(file_name) in SUPPORTED_EXTENSIONS
