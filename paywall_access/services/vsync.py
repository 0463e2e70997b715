"""
Batched visual-mutation scheduler.

Mutators queued during one event-loop turn run together in a single flush,
so a document is never observed half-mutated between them.
"""

import asyncio
from collections.abc import Callable
from typing import Any

from structlog import get_logger

logger = get_logger(__name__)


class Vsync:
    """Queues document mutations and runs them in one batch."""

    def __init__(self) -> None:
        self._pending: list[tuple[Callable[[], Any], asyncio.Future[Any]]] = []
        self._flush_scheduled = False
        self.flush_count = 0

    def mutate_promise(self, mutator: Callable[[], Any]) -> "asyncio.Future[Any]":
        """Schedule `mutator` for the next batch; the future resolves with its result."""
        loop = asyncio.get_running_loop()
        future: asyncio.Future[Any] = loop.create_future()
        self._pending.append((mutator, future))
        if not self._flush_scheduled:
            self._flush_scheduled = True
            loop.call_soon(self._flush)
        return future

    def _flush(self) -> None:
        batch, self._pending = self._pending, []
        self._flush_scheduled = False
        self.flush_count += 1
        logger.debug("vsync_flush", mutations=len(batch))
        for mutator, future in batch:
            if future.cancelled():
                continue
            try:
                future.set_result(mutator())
            except Exception as e:
                future.set_exception(e)
