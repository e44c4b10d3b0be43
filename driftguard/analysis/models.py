from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class MLModel:
    """A registered model, as returned by the model registry service."""

    id: str
    name: str
    version: str
    input_features: tuple[str, ...]
    output_labels: tuple[str, ...]
    framework: str = ""
    is_active: bool = True


class DriftType(str, Enum):
    CONCEPT_DRIFT = "CONCEPT_DRIFT"
    COVARIATE_DRIFT = "COVARIATE_DRIFT"
    PRIOR_DRIFT = "PRIOR_DRIFT"
    NO_DRIFT = "NO_DRIFT"


@dataclass(frozen=True)
class FeatureDrift:
    feature_name: str
    feature_index: int
    drift_score: float
    is_drifted: bool


@dataclass(frozen=True)
class DriftResult:
    """Outcome of one drift analysis of a dataset against a model."""

    id: str
    model_id: str
    drift_type: DriftType
    drift_score: float
    is_drift_detected: bool
    threshold: float = 0.0
    feature_drifts: list[FeatureDrift] = field(default_factory=list)


class PatchType(str, Enum):
    FEATURE_CLIPPING = "FEATURE_CLIPPING"
    FEATURE_REWEIGHTING = "FEATURE_REWEIGHTING"
    THRESHOLD_TUNING = "THRESHOLD_TUNING"
    NORMALIZATION_UPDATE = "NORMALIZATION_UPDATE"
    ENSEMBLE_REWEIGHT = "ENSEMBLE_REWEIGHT"
    CALIBRATION_ADJUST = "CALIBRATION_ADJUST"


class PatchStatus(str, Enum):
    CREATED = "CREATED"
    VALIDATED = "VALIDATED"
    APPLIED = "APPLIED"
    FAILED = "FAILED"
    ROLLED_BACK = "ROLLED_BACK"


@dataclass(frozen=True)
class ValidationMetrics:
    safety_score: float
    drift_reduction: float = 0.0
    drift_score_after_patch: float = 0.0


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    metrics: ValidationMetrics
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def safety_score(self) -> float:
        return self.metrics.safety_score


@dataclass(frozen=True)
class Patch:
    """A corrective adjustment proposed for detected drift."""

    id: str
    model_id: str
    drift_result_id: str
    patch_type: PatchType
    status: PatchStatus
    configuration: dict[str, object] = field(default_factory=dict)
    validation_result: ValidationResult | None = None
