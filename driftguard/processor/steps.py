import asyncio
from dataclasses import replace

from driftguard.analysis.base import (
    BaseDriftDetector,
    BaseModelRegistry,
    BasePatchSynthesizer,
    BasePatchValidator,
)
from driftguard.analysis.exceptions import AnalysisServiceError
from driftguard.analysis.models import PatchStatus
from driftguard.logging.logger import Log
from driftguard.parsing.dataset_parser import DatasetParser, conform_to_model
from driftguard.parsing.model_parser import ModelParser
from driftguard.parsing.sniffer import FileKind, detect_kind, extension_of
from driftguard.processor.exceptions import (
    AnalysisServiceFailureError,
    FormatUnrecognizedError,
    NoActiveModelError,
    TransferFailureError,
)
from driftguard.processor.messages import drift_report_message, model_registered_message
from driftguard.processor.models import FileStatus
from driftguard.processor.pipeline import PipelineContext, PipelineStep
from driftguard.transfer.base import BaseTransferService
from driftguard.transfer.exceptions import TransferError


class TransferStep(PipelineStep):
    """Waits for a transfer slot, then moves the file QUEUED -> UPLOADING and transfers it."""

    def __init__(self, transfer_service: BaseTransferService, slots: asyncio.Semaphore) -> None:
        self._transfer_service = transfer_service
        self._slots = slots

    async def run(self, context: PipelineContext) -> PipelineContext:
        registry = context.session.registry
        async with self._slots:
            registry.update_status(context.file_id, FileStatus.UPLOADING)
            try:
                context.handle = await self._transfer_service.upload(
                    context.reference,
                    on_progress=lambda fraction: registry.update_progress(
                        context.file_id, fraction
                    ),
                )
            except TransferError as exc:
                raise TransferFailureError(str(exc)) from exc
        Log.info(f"Transferred {context.handle.size_bytes} bytes for file {context.file_id}")
        return context


class MarkProcessingStep(PipelineStep):
    async def run(self, context: PipelineContext) -> PipelineContext:
        context.session.registry.update_status(context.file_id, FileStatus.PROCESSING)
        return context


class MarkFailedStep(PipelineStep):
    async def run(self, context: PipelineContext) -> PipelineContext:
        registry = context.session.registry
        if registry.get(context.file_id).status.is_in_flight:
            registry.update_status(
                context.file_id,
                FileStatus.FAILED,
                error_kind=context.error_kind,
                error_message=context.error_message,
            )
        context.session.set_error(f"{context.reference.name}: {context.error_message}")
        Log.error(f"File {context.file_id} marked as failed: {context.error_message}")
        return context


class SniffFormatStep(PipelineStep):
    async def run(self, context: PipelineContext) -> PipelineContext:
        context.kind = detect_kind(context.reference.name)
        if context.kind is FileKind.UNSUPPORTED:
            raise FormatUnrecognizedError(
                f"'{context.reference.name}' is not a supported format "
                f"(extension '{extension_of(context.reference.name) or 'none'}')"
            )
        Log.debug(f"File {context.file_id} sniffed as {context.kind.value}")
        return context


class ParseModelStep(PipelineStep):
    def __init__(self, parser: ModelParser) -> None:
        self._parser = parser

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.handle is None:
            raise ValueError("PipelineContext.handle must be set before parsing")
        context.parsed_model = await asyncio.to_thread(
            self._parser.parse, context.reference.name, context.handle
        )
        context.session.registry.set_format(context.file_id, context.parsed_model.format)
        context.session.registry.update_progress(context.file_id, 0.3)
        return context


class RegisterModelStep(PipelineStep):
    def __init__(self, model_registry: BaseModelRegistry) -> None:
        self._model_registry = model_registry

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.parsed_model is None:
            raise ValueError("PipelineContext.parsed_model must be set before registration")
        try:
            context.model = await self._model_registry.register(context.parsed_model)
        except AnalysisServiceError as exc:
            raise AnalysisServiceFailureError(f"Model registration failed: {exc}") from exc
        Log.info(f"Registered model {context.model.name} ({context.model.id})")
        return context


class CompleteModelStep(PipelineStep):
    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.model is None:
            raise ValueError("PipelineContext.model must be set before completion")
        context.session.record_model_registered(context.model)
        context.session.set_success(model_registered_message(context.model))
        context.session.registry.update_status(context.file_id, FileStatus.PROCESSED)
        return context


class ResolveActiveModelStep(PipelineStep):
    """Pins the model a dataset is analyzed against for the rest of its run."""

    async def run(self, context: PipelineContext) -> PipelineContext:
        model = context.session.active_model
        if model is None:
            raise NoActiveModelError(
                f"No model is registered. Upload a model before the dataset "
                f"'{context.reference.name}'"
            )
        context.model = model
        return context


class ParseDatasetStep(PipelineStep):
    def __init__(self, parser: DatasetParser) -> None:
        self._parser = parser

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.handle is None or context.model is None:
            raise ValueError("PipelineContext.handle and model must be set before parsing")
        dataset = await asyncio.to_thread(
            self._parser.parse, context.reference.name, context.handle
        )
        context.session.registry.set_format(context.file_id, dataset.format)
        context.parsed_dataset = conform_to_model(dataset, context.model)
        context.session.registry.update_progress(context.file_id, 0.2)
        Log.info(f"Parsed {len(dataset.rows)} rows from {context.reference.name}")
        return context


class DetectDriftStep(PipelineStep):
    def __init__(self, drift_detector: BaseDriftDetector) -> None:
        self._drift_detector = drift_detector

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.model is None or context.parsed_dataset is None:
            raise ValueError("PipelineContext.model and parsed_dataset must be set before analysis")
        try:
            context.drift_result = await self._drift_detector.analyze(
                context.model, context.parsed_dataset
            )
        except AnalysisServiceError as exc:
            raise AnalysisServiceFailureError(f"Drift analysis failed: {exc}") from exc
        context.session.registry.update_progress(context.file_id, 0.6)
        Log.info(
            f"Drift analysis for file {context.file_id}: "
            f"detected={context.drift_result.is_drift_detected}, "
            f"score={context.drift_result.drift_score}"
        )
        return context


class SynthesizePatchStep(PipelineStep):
    """Asks for a patch only when drift was detected at or above min_drift_score."""

    def __init__(self, patch_synthesizer: BasePatchSynthesizer, min_drift_score: float) -> None:
        self._patch_synthesizer = patch_synthesizer
        self._min_drift_score = min_drift_score

    async def run(self, context: PipelineContext) -> PipelineContext:
        drift = context.drift_result
        if context.model is None or drift is None:
            raise ValueError("PipelineContext.drift_result must be set before synthesis")
        if not drift.is_drift_detected or drift.drift_score < self._min_drift_score:
            return context
        try:
            context.patch = await self._patch_synthesizer.synthesize(context.model, drift)
        except AnalysisServiceError as exc:
            raise AnalysisServiceFailureError(f"Patch synthesis failed: {exc}") from exc
        if context.patch is None:
            Log.info(f"No patch available for file {context.file_id}")
        else:
            Log.info(f"Patch synthesized: {context.patch.patch_type.value}")
        context.session.registry.update_progress(context.file_id, 0.8)
        return context


class ValidatePatchStep(PipelineStep):
    """Attaches the validation outcome to the patch, valid or not."""

    def __init__(self, patch_validator: BasePatchValidator) -> None:
        self._patch_validator = patch_validator

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.patch is None:
            return context
        try:
            validation = await self._patch_validator.validate(context.patch)
        except AnalysisServiceError as exc:
            raise AnalysisServiceFailureError(f"Patch validation failed: {exc}") from exc
        context.patch = replace(
            context.patch,
            validation_result=validation,
            status=PatchStatus.VALIDATED if validation.is_valid else PatchStatus.FAILED,
        )
        Log.info(
            f"Patch {context.patch.id} validated: valid={validation.is_valid}, "
            f"safety={validation.safety_score}"
        )
        return context


class CompleteReportStep(PipelineStep):
    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.model is None or context.drift_result is None:
            raise ValueError("PipelineContext.drift_result must be set before completion")
        context.session.record_drift_report(context.model, context.drift_result, context.patch)
        context.session.set_success(
            drift_report_message(
                context.model,
                context.drift_result,
                context.patch,
                len(context.parsed_dataset.rows) if context.parsed_dataset else 0,
            )
        )
        context.session.registry.update_status(context.file_id, FileStatus.PROCESSED)
        return context
