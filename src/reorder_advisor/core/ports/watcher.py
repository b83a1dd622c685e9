from collections.abc import Callable, Coroutine
from pathlib import Path
from typing import Any, Protocol

# receives the set of source files touched by one batch of filesystem events
PathsCallback = Callable[[set[Path]], Coroutine[Any, Any, None]]


class FileWatcherPort(Protocol):
    """Reports changed and deleted source files until stopped."""

    async def start(self) -> None: ...

    async def stop(self) -> None: ...
