import asyncio
from collections.abc import Sequence

from driftguard.analysis.base import AnalysisServices
from driftguard.analysis.factory import AnalysisServicesFactory
from driftguard.config.settings import Settings
from driftguard.logging.logger import Log
from driftguard.parsing.dataset_parser import DatasetParser
from driftguard.parsing.model_parser import ModelParser
from driftguard.parsing.sniffer import FileKind
from driftguard.processor.exceptions import ErrorKind, PipelineError
from driftguard.processor.pipeline import PipelineContext, PipelineStep
from driftguard.processor.steps import (
    CompleteModelStep,
    CompleteReportStep,
    DetectDriftStep,
    MarkFailedStep,
    MarkProcessingStep,
    ParseDatasetStep,
    ParseModelStep,
    RegisterModelStep,
    ResolveActiveModelStep,
    SniffFormatStep,
    SynthesizePatchStep,
    TransferStep,
    ValidatePatchStep,
)
from driftguard.session.exceptions import RegistryError
from driftguard.transfer.base import BaseTransferService
from driftguard.transfer.factory import TransferServiceFactory


class Processor:
    """Drives one file through its pipeline.

    Pipeline: transfer -> mark processing -> sniff -> model or dataset branch.
    Any failure other than a registry error runs the failed step before it
    propagates. The staged copy is discarded once the file is done, whatever
    the outcome.
    """

    def __init__(
        self,
        steps: Sequence[PipelineStep],
        model_steps: Sequence[PipelineStep],
        dataset_steps: Sequence[PipelineStep],
        failed_step: PipelineStep,
    ) -> None:
        self._steps = list(steps)
        self._model_steps = list(model_steps)
        self._dataset_steps = list(dataset_steps)
        self._failed_step = failed_step

    async def process(self, context: PipelineContext) -> PipelineContext:
        Log.info(f"Processing file {context.file_id} ({context.reference.name})")
        try:
            for step in self._steps:
                context = await step.run(context)
            branch = self._model_steps if context.kind is FileKind.MODEL else self._dataset_steps
            for step in branch:
                context = await step.run(context)
        except RegistryError:
            raise
        except Exception as exc:
            if isinstance(exc, PipelineError):
                context.error_kind = exc.kind
            else:
                context.error_kind = ErrorKind.ANALYSIS_SERVICE_FAILURE
            context.error_message = str(exc) or exc.__class__.__name__
            await self._failed_step.run(context)
            raise
        finally:
            if context.handle is not None:
                context.handle.discard()
        Log.info(f"File {context.file_id} processed successfully")
        return context


def build_processor(
    settings: Settings,
    transfer_service: BaseTransferService | None = None,
    services: AnalysisServices | None = None,
) -> Processor:
    """Build a Processor with all required adapters."""
    transfer_service = transfer_service or TransferServiceFactory.create(settings)
    services = services or AnalysisServicesFactory.create(settings)
    slots = asyncio.Semaphore(settings.max_concurrent_transfers)
    return Processor(
        steps=[
            TransferStep(transfer_service, slots),
            MarkProcessingStep(),
            SniffFormatStep(),
        ],
        model_steps=[
            ParseModelStep(ModelParser(settings.default_model_input_features)),
            RegisterModelStep(services.model_registry),
            CompleteModelStep(),
        ],
        dataset_steps=[
            ResolveActiveModelStep(),
            ParseDatasetStep(DatasetParser()),
            DetectDriftStep(services.drift_detector),
            SynthesizePatchStep(
                services.patch_synthesizer,
                settings.patch_synthesis_min_drift_score,
            ),
            ValidatePatchStep(services.patch_validator),
            CompleteReportStep(),
        ],
        failed_step=MarkFailedStep(),
    )
