from pathlib import Path

import pytest

from driftguard.parsing.model_parser import ModelParser
from driftguard.processor.exceptions import FormatUnrecognizedError
from driftguard.transfer.models import TransferHandle


def _staged(tmp_path: Path, name: str, content: bytes) -> TransferHandle:
    path = tmp_path / name
    path.write_bytes(content)
    return TransferHandle(path=path, size_bytes=len(content))


class TestModelParser:
    def test_parses_tflite(self, tmp_path: Path, tflite_bytes: bytes) -> None:
        handle = _staged(tmp_path, "drift_model.tflite", tflite_bytes)

        parsed = ModelParser().parse("drift_model.tflite", handle)

        assert parsed.name == "drift_model"
        assert parsed.format == "tflite"
        assert parsed.framework == "TensorFlow Lite"
        assert parsed.input_features == ("feature_0", "feature_1", "feature_2", "feature_3")
        assert parsed.output_labels == ("class_0", "class_1")
        assert parsed.size_bytes == len(tflite_bytes)

    def test_feature_count_is_configurable(self, tmp_path: Path, tflite_bytes: bytes) -> None:
        handle = _staged(tmp_path, "m.tflite", tflite_bytes)
        parsed = ModelParser(default_input_features=7).parse("m.tflite", handle)
        assert len(parsed.input_features) == 7

    @pytest.mark.parametrize(
        ("name", "content", "framework"),
        [
            ("m.onnx", b"\x08\x07\x12\x04test", "ONNX"),
            ("m.h5", b"\x89HDF\r\n\x1a\n" + b"\x00" * 8, "Keras (HDF5)"),
            ("m.pt", b"PK\x03\x04rest", "PyTorch"),
            ("m.pth", b"\x80\x02}q\x00", "PyTorch"),
            ("m.pb", b"\n\x0bgraph", "TensorFlow"),
        ],
    )
    def test_recognizes_signatures(
        self,
        tmp_path: Path,
        name: str,
        content: bytes,
        framework: str,
    ) -> None:
        parsed = ModelParser().parse(name, _staged(tmp_path, name, content))
        assert parsed.framework == framework

    def test_rejects_wrong_signature(self, tmp_path: Path) -> None:
        handle = _staged(tmp_path, "fake.tflite", b"not a model at all")
        with pytest.raises(FormatUnrecognizedError, match="TensorFlow Lite"):
            ModelParser().parse("fake.tflite", handle)

    def test_rejects_empty_pb(self, tmp_path: Path) -> None:
        with pytest.raises(FormatUnrecognizedError):
            ModelParser().parse("empty.pb", _staged(tmp_path, "empty.pb", b""))

    def test_rejects_non_model_extension(self, tmp_path: Path) -> None:
        with pytest.raises(FormatUnrecognizedError, match="not a supported model format"):
            ModelParser().parse("data.csv", _staged(tmp_path, "data.csv", b"1,2"))
