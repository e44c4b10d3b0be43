from driftguard.analysis.base import (
    BaseDriftDetector,
    BaseModelRegistry,
    BasePatchSynthesizer,
    BasePatchValidator,
)
from driftguard.analysis.http_client import AnalysisHttpClient
from driftguard.analysis.models import DriftResult, MLModel, Patch, ValidationResult
from driftguard.analysis.payloads import (
    build_drift_result,
    build_model,
    build_patch,
    build_validation_result,
    dataset_payload,
    drift_payload,
    model_payload,
    parsed_model_payload,
    patch_payload,
)
from driftguard.parsing.models import ParsedDataset, ParsedModel


class HttpModelRegistry(BaseModelRegistry):
    def __init__(self, client: AnalysisHttpClient) -> None:
        self._client = client

    async def register(self, parsed_model: ParsedModel) -> MLModel:
        body = await self._client.post_json("/v1/models", parsed_model_payload(parsed_model))
        return build_model(body)


class HttpDriftDetector(BaseDriftDetector):
    def __init__(self, client: AnalysisHttpClient) -> None:
        self._client = client

    async def analyze(self, model: MLModel, dataset: ParsedDataset) -> DriftResult:
        body = await self._client.post_json(
            "/v1/drift/analyze",
            {"model": model_payload(model), "dataset": dataset_payload(dataset)},
        )
        return build_drift_result(body)


class HttpPatchSynthesizer(BasePatchSynthesizer):
    def __init__(self, client: AnalysisHttpClient) -> None:
        self._client = client

    async def synthesize(self, model: MLModel, drift: DriftResult) -> Patch | None:
        body = await self._client.post_json(
            "/v1/patches/synthesize",
            {"model": model_payload(model), "drift_result": drift_payload(drift)},
        )
        return build_patch(body)


class HttpPatchValidator(BasePatchValidator):
    def __init__(self, client: AnalysisHttpClient) -> None:
        self._client = client

    async def validate(self, patch: Patch) -> ValidationResult:
        body = await self._client.post_json("/v1/patches/validate", {"patch": patch_payload(patch)})
        return build_validation_result(body)
