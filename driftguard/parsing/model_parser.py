from collections.abc import Callable
from typing import ClassVar

from driftguard.parsing.models import ParsedModel
from driftguard.parsing.sniffer import MODEL_EXTENSIONS, extension_of
from driftguard.processor.exceptions import FormatUnrecognizedError
from driftguard.transfer.models import TransferHandle

_HEADER_BYTES = 16
_HDF5_SIGNATURE = b"\x89HDF\r\n\x1a\n"


def _is_tflite(header: bytes) -> bool:
    return header[4:8] == b"TFL3"


def _is_onnx(header: bytes) -> bool:
    # ModelProto starts with field 1 (ir_version), varint wire type.
    return header[:1] == b"\x08"


def _is_hdf5(header: bytes) -> bool:
    return header.startswith(_HDF5_SIGNATURE)


def _is_torch(header: bytes) -> bool:
    return header.startswith(b"PK\x03\x04") or header[:1] == b"\x80"


def _is_non_empty(header: bytes) -> bool:
    return bool(header)


class ModelParser:
    """Checks a model file's signature and derives its metadata."""

    FORMATS: ClassVar[dict[str, tuple[str, Callable[[bytes], bool]]]] = {
        ".tflite": ("TensorFlow Lite", _is_tflite),
        ".onnx": ("ONNX", _is_onnx),
        ".h5": ("Keras (HDF5)", _is_hdf5),
        ".pt": ("PyTorch", _is_torch),
        ".pth": ("PyTorch", _is_torch),
        ".pb": ("TensorFlow", _is_non_empty),
    }

    def __init__(self, default_input_features: int = 4) -> None:
        self._default_input_features = default_input_features

    def parse(self, file_name: str, handle: TransferHandle) -> ParsedModel:
        """Validate the staged file and build a ParsedModel.

        Raises:
            FormatUnrecognizedError: if the extension is not a model format or
                the content does not carry that format's signature.
        """
        extension = extension_of(file_name)
        if extension not in MODEL_EXTENSIONS:
            raise FormatUnrecognizedError(
                f"'{file_name}' is not a supported model format. "
                f"Supported: {', '.join(sorted(MODEL_EXTENSIONS))}"
            )
        framework, check = self.FORMATS[extension]
        with handle.path.open("rb") as fh:
            header = fh.read(_HEADER_BYTES)
        if not check(header):
            raise FormatUnrecognizedError(
                f"'{file_name}' does not look like a {framework} model"
            )
        stem = file_name[: -len(extension)] or file_name
        return ParsedModel(
            name=stem,
            version="1.0.0",
            framework=framework,
            format=extension.lstrip("."),
            input_features=tuple(
                f"feature_{i}" for i in range(self._default_input_features)
            ),
            output_labels=("class_0", "class_1"),
            path=handle.path,
            size_bytes=handle.size_bytes,
        )
