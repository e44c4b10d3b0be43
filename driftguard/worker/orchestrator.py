import asyncio
from collections.abc import Iterable
from dataclasses import replace
from types import TracebackType

from driftguard.config.settings import Settings
from driftguard.ingestion.base import BaseIngestionChannel
from driftguard.ingestion.exceptions import IngestionError
from driftguard.ingestion.models import FileReference, UploadMethod
from driftguard.logging.logger import Log
from driftguard.processor.models import FileStatus, UploadedFile
from driftguard.processor.processor import Processor, build_processor
from driftguard.session.exceptions import FileNotFoundInRegistryError
from driftguard.session.progress import ProgressSnapshot
from driftguard.session.projector import ResultProjection
from driftguard.session.session import UploadSession
from driftguard.worker.file_runner import FileRunner


class UploadOrchestrator:
    """Entry point for every ingestion channel.

    Spawns one worker task per ingested file. Transfer concurrency is bounded
    inside the processor, so files beyond the bound wait in QUEUED.
    """

    def __init__(self, processor: Processor, session: UploadSession | None = None) -> None:
        self._session = session if session is not None else UploadSession()
        self._runner = FileRunner(processor, self._session)
        self._tasks: dict[str, asyncio.Task[None]] = {}

    @property
    def session(self) -> UploadSession:
        return self._session

    def select_method(self, method: UploadMethod) -> None:
        self._session.ensure_open()
        self._session.selected_method = method
        self._session.dismiss_messages()

    async def ingest(
        self,
        refs: Iterable[FileReference],
        source: UploadMethod,
    ) -> list[str]:
        """Register each reference and start its worker.

        Returns:
            One new file id per reference, in input order.

        Raises:
            SessionClosedError: if the session was torn down.
        """
        self._session.ensure_open()
        file_ids: list[str] = []
        for ref in refs:
            if ref.source is not source:
                ref = replace(ref, source=source)
            file_id = self._session.registry.register(ref)
            task = asyncio.create_task(self._runner.run(file_id), name=f"file-{file_id}")
            self._tasks[file_id] = task
            task.add_done_callback(lambda _t, fid=file_id: self._tasks.pop(fid, None))
            file_ids.append(file_id)
        Log.info(f"Ingested {len(file_ids)} file(s) from {source.value}")
        return file_ids

    async def ingest_from(self, channel: BaseIngestionChannel) -> list[str]:
        """Drain a channel and ingest its references as one batch.

        A channel that cannot resolve its sources ingests nothing and sets the
        session error instead.
        """
        self._session.ensure_open()
        try:
            refs = list(channel.produce_references())
        except IngestionError as exc:
            Log.error(f"Ingestion from {channel.method.value} failed: {exc}")
            self._session.set_error(str(exc))
            return []
        return await self.ingest(refs, channel.method)

    def remove_file(self, file_id: str) -> UploadedFile:
        """Remove a queued, processed or failed file. A queued file never starts.

        Raises:
            FileNotFoundInRegistryError: if no such file is registered.
            FileInFlightError: if the file is uploading or processing.
        """
        removed = self._session.registry.remove(file_id)
        task = self._tasks.pop(file_id, None)
        if task is not None and not task.done():
            task.cancel()
        return removed

    def observe_progress(self) -> ProgressSnapshot:
        return self._session.progress

    def observe_files(self) -> list[UploadedFile]:
        return self._session.registry.list()

    def observe_result(self) -> ResultProjection:
        return self._session.projection()

    def dismiss_messages(self) -> None:
        self._session.dismiss_messages()

    async def wait_idle(self) -> None:
        """Wait until every started worker has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks.values()), return_exceptions=True)

    async def close(self) -> None:
        """Cancel queued files, let in-flight ones finish, then tear the session down."""
        if self._session.closed:
            return
        for file_id, task in list(self._tasks.items()):
            try:
                queued = self._session.registry.get(file_id).status is FileStatus.QUEUED
            except FileNotFoundInRegistryError:
                queued = True
            if queued:
                task.cancel()
        await self.wait_idle()
        self._session.teardown()
        Log.info("Upload session closed")

    async def __aenter__(self) -> "UploadOrchestrator":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()


def build_orchestrator(
    settings: Settings, session: UploadSession | None = None
) -> UploadOrchestrator:
    """Build an orchestrator over a fresh session with the configured adapters."""
    return UploadOrchestrator(build_processor(settings), session)
