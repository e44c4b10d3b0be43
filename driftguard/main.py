import asyncio
from pathlib import Path

import typer

from driftguard.config.settings import Settings
from driftguard.database.connection import close_pool, init_pool
from driftguard.ingestion.factory import IngestionChannelFactory
from driftguard.ingestion.models import UploadMethod
from driftguard.logging.logger import Log
from driftguard.session.projector import FullReport, ModelRegistered
from driftguard.worker.orchestrator import UploadOrchestrator, build_orchestrator

app = typer.Typer(no_args_is_help=True)


@app.callback()
def main() -> None:
    """DriftGuard model and dataset upload CLI."""


@app.command(name="upload")
def upload(
    paths: list[Path] = typer.Argument(None, help="Local model or dataset files."),
    url: list[str] = typer.Option([], "--url", help="Import a file from an http(s) URL."),
    drop: list[Path] = typer.Option([], "--drop", help="Drop a file or directory."),
    cloud: str | None = typer.Option(None, "--cloud", help="Import from a cloud provider."),
) -> None:
    """Upload files in one session and print the outcome."""
    settings = Settings()
    Log.configure(settings.log_level)
    batches: list[tuple[UploadMethod, list[str]]] = []
    if paths:
        batches.append((UploadMethod.LOCAL_FILE, [str(p) for p in paths]))
    if drop:
        batches.append((UploadMethod.DRAG_DROP, [str(p) for p in drop]))
    if url:
        batches.append((UploadMethod.URL_IMPORT, list(url)))
    if cloud:
        batches.append((UploadMethod.CLOUD_STORAGE, [cloud]))
    if not batches:
        typer.echo("Nothing to upload.")
        raise typer.Exit(code=1)

    use_db = settings.model_registry_backend.lower() == "postgres"
    if use_db:
        init_pool(settings)
    try:
        failed = asyncio.run(_run_session(settings, batches))
    finally:
        if use_db:
            close_pool()
    if failed:
        raise typer.Exit(code=1)


async def _run_session(
    settings: Settings,
    batches: list[tuple[UploadMethod, list[str]]],
) -> bool:
    async with build_orchestrator(settings) as orchestrator:
        # Batches run one after another so a model lands before the datasets
        # that follow it on the command line.
        for method, sources in batches:
            orchestrator.select_method(method)
            channel = IngestionChannelFactory.create(method, sources, settings)
            await orchestrator.ingest_from(channel)
            await orchestrator.wait_idle()
        return _report(orchestrator)


def _report(orchestrator: UploadOrchestrator) -> bool:
    files = orchestrator.observe_files()
    for record in files:
        line = f"{record.status.value:<10} {record.name} ({record.size_display})"
        if record.error_message:
            line += f" - {record.error_message}"
        typer.echo(line)

    session = orchestrator.session
    if session.error:
        typer.echo(f"\nError: {session.error}")
    if session.success_message:
        typer.echo(f"\n{session.success_message}")

    projection = orchestrator.observe_result()
    if isinstance(projection, FullReport):
        typer.echo(
            f"\nResult: drift report for {projection.model.name} "
            f"(score {projection.drift_result.drift_score:.3f}, "
            f"patch {'attached' if projection.patch else 'none'})"
        )
    elif isinstance(projection, ModelRegistered):
        typer.echo(f"\nResult: model {projection.model.name} registered")
    else:
        typer.echo("\nResult: nothing processed")
    return not files or any(record.error_kind is not None for record in files)


if __name__ == "__main__":
    app()
