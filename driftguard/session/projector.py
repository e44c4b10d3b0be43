from dataclasses import dataclass
from typing import Protocol, Union

from driftguard.analysis.models import DriftResult, MLModel, Patch


@dataclass(frozen=True)
class Empty:
    """Nothing has completed yet."""


@dataclass(frozen=True)
class ModelRegistered:
    model: MLModel


@dataclass(frozen=True)
class FullReport:
    """Drift analysis of a dataset against model.

    patch is None when drift was not detected, synthesis was skipped, or
    synthesis produced nothing.
    """

    model: MLModel
    drift_result: DriftResult
    patch: Patch | None = None


ResultProjection = Union[Empty, ModelRegistered, FullReport]


class ResultSet(Protocol):
    processed_model: MLModel | None
    detected_drift: DriftResult | None
    synthesized_patch: Patch | None


def project(result: ResultSet) -> ResultProjection:
    if result.processed_model is None:
        return Empty()
    if result.detected_drift is None:
        return ModelRegistered(model=result.processed_model)
    return FullReport(
        model=result.processed_model,
        drift_result=result.detected_drift,
        patch=result.synthesized_patch,
    )
