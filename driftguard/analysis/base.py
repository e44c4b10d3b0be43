from abc import ABC, abstractmethod
from dataclasses import dataclass

from driftguard.analysis.models import DriftResult, MLModel, Patch, ValidationResult
from driftguard.parsing.models import ParsedDataset, ParsedModel


class BaseModelRegistry(ABC):
    """Contract for model registration backends."""

    @abstractmethod
    async def register(self, parsed_model: ParsedModel) -> MLModel:
        """Register a parsed model and make it the active one.

        Raises:
            AnalysisServiceError: on any failure.
        """


class BaseDriftDetector(ABC):
    """Contract for drift detection services."""

    @abstractmethod
    async def analyze(self, model: MLModel, dataset: ParsedDataset) -> DriftResult:
        """Compare a dataset against the model's expectations.

        Raises:
            AnalysisServiceError: on any failure.
        """


class BasePatchSynthesizer(ABC):
    """Contract for patch synthesis services."""

    @abstractmethod
    async def synthesize(self, model: MLModel, drift: DriftResult) -> Patch | None:
        """Propose a corrective patch, or None when no patch is available.

        Raises:
            AnalysisServiceError: on any failure.
        """


class BasePatchValidator(ABC):
    """Contract for patch validation services."""

    @abstractmethod
    async def validate(self, patch: Patch) -> ValidationResult:
        """Check a synthesized patch.

        Raises:
            AnalysisServiceError: on any failure.
        """


@dataclass(frozen=True)
class AnalysisServices:
    """The external collaborators the pipeline calls after transfer."""

    model_registry: BaseModelRegistry
    drift_detector: BaseDriftDetector
    patch_synthesizer: BasePatchSynthesizer
    patch_validator: BasePatchValidator
