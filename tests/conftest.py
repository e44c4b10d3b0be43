from collections.abc import Callable
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from driftguard.analysis.base import (
    AnalysisServices,
    BaseDriftDetector,
    BaseModelRegistry,
    BasePatchSynthesizer,
    BasePatchValidator,
)
from driftguard.analysis.models import (
    DriftResult,
    DriftType,
    FeatureDrift,
    MLModel,
    Patch,
    PatchStatus,
    PatchType,
    ValidationMetrics,
    ValidationResult,
)
from driftguard.config.settings import Settings
from driftguard.ingestion.models import FileReference, UploadMethod

_FEATURES = ("feature_0", "feature_1", "feature_2", "feature_3")


def _make_model(model_id: str = "model-1", name: str = "model") -> MLModel:
    return MLModel(
        id=model_id,
        name=name,
        version="1.0.0",
        input_features=_FEATURES,
        output_labels=("class_0", "class_1"),
        framework="TensorFlow Lite",
    )


def _make_drift(
    model_id: str = "model-1",
    score: float = 0.82,
    detected: bool = True,
) -> DriftResult:
    return DriftResult(
        id="drift-1",
        model_id=model_id,
        drift_type=DriftType.COVARIATE_DRIFT if detected else DriftType.NO_DRIFT,
        drift_score=score,
        is_drift_detected=detected,
        threshold=0.2,
        feature_drifts=[
            FeatureDrift(
                feature_name="feature_0",
                feature_index=0,
                drift_score=score,
                is_drifted=detected,
            )
        ],
    )


def _make_patch(model_id: str = "model-1") -> Patch:
    return Patch(
        id="patch-1",
        model_id=model_id,
        drift_result_id="drift-1",
        patch_type=PatchType.FEATURE_CLIPPING,
        status=PatchStatus.CREATED,
        configuration={"feature_indices": [0]},
    )


def _make_validation(safety: float = 0.65, is_valid: bool = True) -> ValidationResult:
    return ValidationResult(is_valid=is_valid, metrics=ValidationMetrics(safety_score=safety))


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(staging_dir=tmp_path / "staging", max_concurrent_transfers=2)


@pytest.fixture()
def services() -> AnalysisServices:
    """Analysis collaborators with canned drift, patch and validation results."""
    registry = AsyncMock(spec=BaseModelRegistry)
    registry.register.return_value = _make_model()
    detector = AsyncMock(spec=BaseDriftDetector)
    detector.analyze.return_value = _make_drift()
    synthesizer = AsyncMock(spec=BasePatchSynthesizer)
    synthesizer.synthesize.return_value = _make_patch()
    validator = AsyncMock(spec=BasePatchValidator)
    validator.validate.return_value = _make_validation()
    return AnalysisServices(
        model_registry=registry,
        drift_detector=detector,
        patch_synthesizer=synthesizer,
        patch_validator=validator,
    )


@pytest.fixture()
def tflite_bytes() -> bytes:
    """Minimal flatbuffer header carrying the TFLite file identifier."""
    return b"\x1c\x00\x00\x00TFL3" + b"\x00" * 24


@pytest.fixture()
def csv_text() -> str:
    rows = ["feature_0,feature_1,feature_2,feature_3"]
    rows += [f"{i}.0,{i * 2}.0,1.0,0.5" for i in range(10)]
    return "\n".join(rows) + "\n"


@pytest.fixture()
def write_file(tmp_path: Path) -> Callable[..., FileReference]:
    """Write a file under tmp_path/src and return a local reference to it."""

    def _write(name: str, content: bytes | str) -> FileReference:
        source_dir = tmp_path / "src"
        source_dir.mkdir(exist_ok=True)
        path = source_dir / name
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_bytes(content)
        return FileReference(
            name=name,
            location=str(path),
            source=UploadMethod.LOCAL_FILE,
            size_bytes=path.stat().st_size,
        )

    return _write


@pytest.fixture()
def model() -> MLModel:
    return _make_model()
