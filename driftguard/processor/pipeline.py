from abc import ABC, abstractmethod
from dataclasses import dataclass

from driftguard.analysis.models import DriftResult, MLModel, Patch
from driftguard.ingestion.models import FileReference
from driftguard.parsing.models import ParsedDataset, ParsedModel
from driftguard.parsing.sniffer import FileKind
from driftguard.processor.exceptions import ErrorKind
from driftguard.session.session import UploadSession
from driftguard.transfer.models import TransferHandle


@dataclass(slots=True)
class PipelineContext:
    file_id: str
    reference: FileReference
    session: UploadSession
    kind: FileKind | None = None
    handle: TransferHandle | None = None
    parsed_model: ParsedModel | None = None
    parsed_dataset: ParsedDataset | None = None
    model: MLModel | None = None
    drift_result: DriftResult | None = None
    patch: Patch | None = None
    error_kind: ErrorKind | None = None
    error_message: str = ""


class PipelineStep(ABC):
    @abstractmethod
    async def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
