from unittest.mock import AsyncMock, MagicMock

import pytest

from driftguard.ingestion.models import FileReference, UploadMethod
from driftguard.processor.exceptions import TransferFailureError
from driftguard.processor.processor import Processor
from driftguard.session.exceptions import FileNotFoundInRegistryError
from driftguard.session.session import UploadSession
from driftguard.worker.file_runner import FileRunner


def _make_runner() -> tuple[FileRunner, MagicMock, UploadSession]:
    processor = MagicMock(spec=Processor)
    processor.process = AsyncMock()
    session = UploadSession()
    return FileRunner(processor, session), processor, session


def _ref() -> FileReference:
    return FileReference(name="data.csv", location="/data/data.csv", source=UploadMethod.LOCAL_FILE)


class TestFileRunner:
    @pytest.mark.asyncio
    async def test_builds_context_for_file(self) -> None:
        runner, processor, session = _make_runner()
        file_id = session.registry.register(_ref())

        await runner.run(file_id)

        context = processor.process.await_args.args[0]
        assert context.file_id == file_id
        assert context.reference == _ref()
        assert context.session is session

    @pytest.mark.asyncio
    async def test_removed_file_is_skipped(self) -> None:
        runner, processor, _session = _make_runner()

        await runner.run("missing")

        processor.process.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [TransferFailureError("down"), FileNotFoundInRegistryError("gone"), RuntimeError("bug")],
    )
    async def test_contains_failures(self, error: Exception) -> None:
        runner, processor, session = _make_runner()
        processor.process.side_effect = error
        file_id = session.registry.register(_ref())

        await runner.run(file_id)

        processor.process.assert_awaited_once()
