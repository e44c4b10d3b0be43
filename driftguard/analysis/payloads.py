"""JSON payloads exchanged with the HTTP analysis service."""

from typing import Any

from driftguard.analysis.exceptions import AnalysisPayloadError
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
from driftguard.parsing.models import ParsedDataset, ParsedModel


def parsed_model_payload(parsed: ParsedModel) -> dict[str, Any]:
    return {
        "name": parsed.name,
        "version": parsed.version,
        "framework": parsed.framework,
        "format": parsed.format,
        "input_features": list(parsed.input_features),
        "output_labels": list(parsed.output_labels),
        "size_bytes": parsed.size_bytes,
    }


def model_payload(model: MLModel) -> dict[str, Any]:
    return {
        "id": model.id,
        "name": model.name,
        "version": model.version,
        "framework": model.framework,
        "input_features": list(model.input_features),
        "output_labels": list(model.output_labels),
        "is_active": model.is_active,
    }


def dataset_payload(dataset: ParsedDataset) -> dict[str, Any]:
    return {
        "name": dataset.name,
        "format": dataset.format,
        "columns": list(dataset.columns),
        "rows": [list(row) for row in dataset.rows],
    }


def drift_payload(drift: DriftResult) -> dict[str, Any]:
    return {
        "id": drift.id,
        "model_id": drift.model_id,
        "drift_type": drift.drift_type.value,
        "drift_score": drift.drift_score,
        "is_drift_detected": drift.is_drift_detected,
        "threshold": drift.threshold,
        "feature_drifts": [
            {
                "feature_name": f.feature_name,
                "feature_index": f.feature_index,
                "drift_score": f.drift_score,
                "is_drifted": f.is_drifted,
            }
            for f in drift.feature_drifts
        ],
    }


def patch_payload(patch: Patch) -> dict[str, Any]:
    return {
        "id": patch.id,
        "model_id": patch.model_id,
        "drift_result_id": patch.drift_result_id,
        "patch_type": patch.patch_type.value,
        "status": patch.status.value,
        "configuration": patch.configuration,
    }


def build_model(data: Any) -> MLModel:
    obj = _require_object(data, "model")
    return MLModel(
        id=_require_str(obj, "id", "model"),
        name=_require_str(obj, "name", "model"),
        version=_require_str(obj, "version", "model"),
        input_features=tuple(_require_str_list(obj, "input_features", "model")),
        output_labels=tuple(_require_str_list(obj, "output_labels", "model")),
        framework=str(obj.get("framework") or ""),
        is_active=bool(obj.get("is_active", True)),
    )


def build_drift_result(data: Any) -> DriftResult:
    obj = _require_object(data, "drift result")
    raw_features = obj.get("feature_drifts", [])
    if not isinstance(raw_features, list):
        raise AnalysisPayloadError("'feature_drifts' must be a list")
    return DriftResult(
        id=_require_str(obj, "id", "drift result"),
        model_id=_require_str(obj, "model_id", "drift result"),
        drift_type=_require_enum(DriftType, obj.get("drift_type"), "drift_type"),
        drift_score=_require_number(obj, "drift_score", "drift result"),
        is_drift_detected=_require_bool(obj, "is_drift_detected", "drift result"),
        threshold=_require_number(obj, "threshold", "drift result", default=0.0),
        feature_drifts=[_build_feature_drift(item, i) for i, item in enumerate(raw_features)],
    )


def build_patch(data: Any) -> Patch | None:
    if data is None:
        return None
    obj = _require_object(data, "patch")
    configuration = obj.get("configuration") or {}
    if not isinstance(configuration, dict):
        raise AnalysisPayloadError("'patch.configuration' must be an object")
    validation = obj.get("validation_result")
    return Patch(
        id=_require_str(obj, "id", "patch"),
        model_id=_require_str(obj, "model_id", "patch"),
        drift_result_id=_require_str(obj, "drift_result_id", "patch"),
        patch_type=_require_enum(PatchType, obj.get("patch_type"), "patch_type"),
        status=_require_enum(PatchStatus, obj.get("status"), "status"),
        configuration=configuration,
        validation_result=build_validation_result(validation) if validation is not None else None,
    )


def build_validation_result(data: Any) -> ValidationResult:
    obj = _require_object(data, "validation result")
    metrics = _require_object(obj.get("metrics"), "validation metrics")
    return ValidationResult(
        is_valid=_require_bool(obj, "is_valid", "validation result"),
        metrics=ValidationMetrics(
            safety_score=_require_number(metrics, "safety_score", "validation metrics"),
            drift_reduction=_require_number(
                metrics, "drift_reduction", "validation metrics", default=0.0
            ),
            drift_score_after_patch=_require_number(
                metrics, "drift_score_after_patch", "validation metrics", default=0.0
            ),
        ),
        errors=[str(e) for e in obj.get("errors") or []],
        warnings=[str(w) for w in obj.get("warnings") or []],
    )


def _build_feature_drift(raw: Any, index: int) -> FeatureDrift:
    where = f"feature drift at index {index}"
    obj = _require_object(raw, where)
    feature_index = obj.get("feature_index", index)
    if not isinstance(feature_index, int) or isinstance(feature_index, bool):
        raise AnalysisPayloadError(f"{where}: 'feature_index' must be an integer")
    return FeatureDrift(
        feature_name=_require_str(obj, "feature_name", where),
        feature_index=feature_index,
        drift_score=_require_number(obj, "drift_score", where),
        is_drifted=_require_bool(obj, "is_drifted", where),
    )


def _require_object(raw: Any, what: str) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise AnalysisPayloadError(f"{what} must be an object")
    return raw


def _require_str(obj: dict[str, Any], key: str, what: str) -> str:
    value = obj.get(key)
    if not value or not isinstance(value, str):
        raise AnalysisPayloadError(f"{what}: '{key}' must be a non-empty string")
    return value


def _require_str_list(obj: dict[str, Any], key: str, what: str) -> list[str]:
    value = obj.get(key)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise AnalysisPayloadError(f"{what}: '{key}' must be a list of strings")
    return value


def _require_number(
    obj: dict[str, Any], key: str, what: str, default: float | None = None
) -> float:
    value = obj.get(key)
    if value is None and default is not None:
        return default
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise AnalysisPayloadError(f"{what}: '{key}' must be a number")
    return float(value)


def _require_bool(obj: dict[str, Any], key: str, what: str) -> bool:
    value = obj.get(key)
    if not isinstance(value, bool):
        raise AnalysisPayloadError(f"{what}: '{key}' must be a boolean")
    return value


def _require_enum(enum_cls: Any, raw: Any, key: str) -> Any:
    try:
        return enum_cls(raw)
    except ValueError as exc:
        allowed = [member.value for member in enum_cls]
        raise AnalysisPayloadError(f"'{key}' must be one of {allowed}, got {raw!r}") from exc
