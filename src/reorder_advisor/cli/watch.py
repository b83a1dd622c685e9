import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from reorder_advisor.config import load_config
from reorder_advisor.core.advisor import AdvisorService
from reorder_advisor.core.scheduler import RerunScheduler
from reorder_advisor.errors import AdvisorError
from reorder_advisor.helpers import read_source
from reorder_advisor.models import Job
from reorder_advisor.store.memory import InMemoryJobStore
from reorder_advisor.watcher.watchfiles_adapter import WatchfilesWatcher

console = Console()
logger = logging.getLogger(__name__)


def _report(file_path: str, job: Job | None) -> None:
    if job is None:
        console.print(f"[dim]{file_path}: no improving move[/dim]")
    else:
        console.print(f"[green]{file_path}[/green]: {job.title}")


def schedule_changes(scheduler: RerunScheduler, paths: set[Path]) -> None:
    for path in sorted(paths):
        try:
            text = read_source(path)
        except (AdvisorError, OSError) as exc:
            logger.warning("Skipping %s: %s", path, exc)
            continue
        scheduler.schedule(str(path), text)


def watch(
    directory: Annotated[Path, typer.Argument(help="Directory to watch.", exists=True, file_okay=False)] = Path("."),
    debounce: Annotated[float | None, typer.Option(help="Seconds to wait for a burst of changes to settle.")] = None,
) -> None:
    """Propose moves for source files as they change."""
    config = load_config(debounce_seconds=debounce)
    service = AdvisorService(InMemoryJobStore(), config)

    async def _run() -> None:
        scheduler = RerunScheduler(service, on_result=_report)

        async def _on_change(paths: set[Path]) -> None:
            schedule_changes(scheduler, paths)

        async def _on_delete(paths: set[Path]) -> None:
            for path in paths:
                service.forget(str(path))

        watcher = WatchfilesWatcher(directory, _on_change, _on_delete)
        await watcher.start()
        console.print(f"[green]Watching[/green] {directory} (Ctrl+C to stop)")
        try:
            await asyncio.Event().wait()
        finally:
            await watcher.stop()
            await scheduler.close()

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        console.print("Stopped.")
