from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable

from reorder_advisor.core.advisor import AdvisorService
from reorder_advisor.models import Job

logger = logging.getLogger(__name__)


class RerunScheduler:
    """Debounce change events per file before rerunning the advisor.

    A newer event for a file cancels the pending rerun, so only the latest
    snapshot of each file is ever analysed.
    """

    def __init__(
        self,
        service: AdvisorService,
        delay: float | None = None,
        on_result: Callable[[str, Job | None], None] | None = None,
    ) -> None:
        self._service = service
        self._delay = service.config.debounce_seconds if delay is None else delay
        self._on_result = on_result
        self._pending: dict[str, asyncio.Task[None]] = {}

    @property
    def pending(self) -> set[str]:
        return set(self._pending)

    def schedule(self, file_path: str, text: str, line: int = 0, column: int = 0) -> None:
        previous = self._pending.pop(file_path, None)
        if previous is not None:
            previous.cancel()
        self._pending[file_path] = asyncio.create_task(self._rerun(file_path, text, line, column))

    async def flush(self) -> None:
        """Wait until every scheduled rerun has finished."""
        while self._pending:
            await asyncio.gather(*self._pending.values(), return_exceptions=True)

    async def close(self) -> None:
        tasks = list(self._pending.values())
        self._pending.clear()
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def _rerun(self, file_path: str, text: str, line: int, column: int) -> None:
        try:
            await asyncio.sleep(self._delay)
            job = self._service.refresh(file_path, text, line, column)
            if self._on_result is not None:
                self._on_result(file_path, job)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Error rerunning advisor for %s", file_path)
        finally:
            if self._pending.get(file_path) is asyncio.current_task():
                del self._pending[file_path]
