from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Iterable
from pathlib import Path

from watchfiles import Change, awatch

from reorder_advisor.core.languages import is_supported_file
from reorder_advisor.core.ports.watcher import PathsCallback

logger = logging.getLogger(__name__)


def split_changes(changes: Iterable[tuple[Change, str]]) -> tuple[set[Path], set[Path]]:
    """Partition one batch of events into (changed, deleted) source files."""
    changed: set[Path] = set()
    deleted: set[Path] = set()
    for change, raw_path in changes:
        path = Path(raw_path)
        if is_supported_file(path):
            (deleted if change == Change.deleted else changed).add(path)
    # a file deleted and recreated in the same batch counts as changed
    return changed, deleted - changed


class WatchfilesWatcher:
    """Feed source-file changes under a directory to the advisor callbacks.

    Implements the ``FileWatcherPort`` protocol.
    """

    def __init__(
        self,
        directory: str | Path,
        on_change: PathsCallback,
        on_delete: PathsCallback | None = None,
    ) -> None:
        self._directory = Path(directory)
        self._on_change = on_change
        self._on_delete = on_delete
        self._task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._watch())
        logger.info("Watching %s for source changes", self._directory)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Stopped watching %s", self._directory)

    async def _watch(self) -> None:
        async for changes in awatch(self._directory):
            changed, deleted = split_changes(changes)
            try:
                if changed:
                    logger.info("%d source file(s) changed", len(changed))
                    await self._on_change(changed)
                if deleted and self._on_delete is not None:
                    logger.info("%d source file(s) deleted", len(deleted))
                    await self._on_delete(deleted)
            except Exception:
                logger.exception("Error in watcher callback")
