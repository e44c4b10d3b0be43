"""Example analysis adapters.

Deterministic, in-process stand-ins for the external analysis services.
Useful for local development, tests, and as a template when wiring a real
provider: implement the contracts in analysis.base and register the provider
in AnalysisServicesFactory.
"""

import statistics
import uuid

from driftguard.analysis.base import (
    BaseDriftDetector,
    BaseModelRegistry,
    BasePatchSynthesizer,
    BasePatchValidator,
)
from driftguard.analysis.exceptions import AnalysisServiceError
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

_REFERENCE_SPLIT = 0.7


class InMemoryModelRegistry(BaseModelRegistry):
    """Keeps registered models in a dict; the newest one is active."""

    def __init__(self) -> None:
        self._models: dict[str, MLModel] = {}

    async def register(self, parsed_model: ParsedModel) -> MLModel:
        for model_id, existing in self._models.items():
            if existing.is_active:
                self._models[model_id] = MLModel(
                    id=existing.id,
                    name=existing.name,
                    version=existing.version,
                    input_features=existing.input_features,
                    output_labels=existing.output_labels,
                    framework=existing.framework,
                    is_active=False,
                )
        model = MLModel(
            id=str(uuid.uuid4()),
            name=parsed_model.name,
            version=parsed_model.version,
            input_features=parsed_model.input_features,
            output_labels=parsed_model.output_labels,
            framework=parsed_model.framework,
            is_active=True,
        )
        self._models[model.id] = model
        return model


class ExampleDriftDetector(BaseDriftDetector):
    """Scores each feature by the mean shift between the first 70% and last 30% of rows."""

    def __init__(self, threshold: float = 0.2) -> None:
        self._threshold = threshold

    async def analyze(self, model: MLModel, dataset: ParsedDataset) -> DriftResult:
        if len(dataset.rows) < 2:
            raise AnalysisServiceError(
                f"Dataset '{dataset.name}' needs at least 2 rows for drift analysis"
            )
        split = max(1, int(len(dataset.rows) * _REFERENCE_SPLIT))
        split = min(split, len(dataset.rows) - 1)
        reference = dataset.rows[:split]
        current = dataset.rows[split:]

        feature_drifts = [
            self._feature_drift(name, index, reference, current)
            for index, name in enumerate(model.input_features)
        ]
        score = statistics.fmean(f.drift_score for f in feature_drifts) if feature_drifts else 0.0
        detected = any(f.is_drifted for f in feature_drifts)
        return DriftResult(
            id=str(uuid.uuid4()),
            model_id=model.id,
            drift_type=DriftType.COVARIATE_DRIFT if detected else DriftType.NO_DRIFT,
            drift_score=round(score, 4),
            is_drift_detected=detected,
            threshold=self._threshold,
            feature_drifts=feature_drifts,
        )

    def _feature_drift(
        self,
        name: str,
        index: int,
        reference: list[tuple[float, ...]],
        current: list[tuple[float, ...]],
    ) -> FeatureDrift:
        ref_values = [row[index] for row in reference]
        cur_values = [row[index] for row in current]
        spread = statistics.pstdev(ref_values) or 1.0
        shift = abs(statistics.fmean(cur_values) - statistics.fmean(ref_values)) / spread
        score = round(min(shift / 3.0, 1.0), 4)
        return FeatureDrift(
            feature_name=name,
            feature_index=index,
            drift_score=score,
            is_drifted=score > self._threshold,
        )


class ExamplePatchSynthesizer(BasePatchSynthesizer):
    """Proposes clipping for moderate drift and renormalization for severe drift."""

    async def synthesize(self, model: MLModel, drift: DriftResult) -> Patch | None:
        drifted = [f.feature_index for f in drift.feature_drifts if f.is_drifted]
        if not drifted:
            return None
        if drift.drift_score >= 0.7:
            patch_type = PatchType.NORMALIZATION_UPDATE
        else:
            patch_type = PatchType.FEATURE_CLIPPING
        return Patch(
            id=str(uuid.uuid4()),
            model_id=model.id,
            drift_result_id=drift.id,
            patch_type=patch_type,
            status=PatchStatus.CREATED,
            configuration={"feature_indices": drifted, "drift_score": drift.drift_score},
        )


class ExamplePatchValidator(BasePatchValidator):
    """Derives a safety score from the drift the patch was built for."""

    def __init__(self, min_safety_score: float = 0.5) -> None:
        self._min_safety_score = min_safety_score

    async def validate(self, patch: Patch) -> ValidationResult:
        drift_score = float(patch.configuration.get("drift_score", 0.0))  # type: ignore[arg-type]
        safety = round(1.0 - 0.5 * drift_score, 4)
        after = round(drift_score * 0.4, 4)
        is_valid = safety >= self._min_safety_score
        return ValidationResult(
            is_valid=is_valid,
            metrics=ValidationMetrics(
                safety_score=safety,
                drift_reduction=round(drift_score - after, 4),
                drift_score_after_patch=after,
            ),
            errors=[] if is_valid else [f"Safety score {safety} below {self._min_safety_score}"],
        )
