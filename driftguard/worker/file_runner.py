from driftguard.logging.logger import Log
from driftguard.processor.exceptions import PipelineError
from driftguard.processor.pipeline import PipelineContext
from driftguard.processor.processor import Processor
from driftguard.session.exceptions import FileNotFoundInRegistryError
from driftguard.session.session import UploadSession


class FileRunner:
    """Run one file through the processor and contain its failure.

    Failures are reported on the file's record, never retried.
    """

    def __init__(self, processor: Processor, session: UploadSession) -> None:
        self._processor = processor
        self._session = session

    async def run(self, file_id: str) -> None:
        try:
            record = self._session.registry.get(file_id)
        except FileNotFoundInRegistryError:
            Log.warning(f"File {file_id} was removed before it started")
            return
        context = PipelineContext(
            file_id=file_id,
            reference=record.reference,
            session=self._session,
        )
        try:
            await self._processor.process(context)
        except PipelineError as exc:
            Log.warning(f"File {file_id} failed ({exc.kind.value}): {exc}")
        except FileNotFoundInRegistryError:
            Log.warning(f"File {file_id} left the registry while running")
        except Exception as exc:
            Log.exception(f"File {file_id} failed unexpectedly: {exc}")
