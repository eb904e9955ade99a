from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Callable

from domain.ports.collaborators import Scheduler

logger = logging.getLogger(__name__)


class DeferredQueue(Scheduler):
    """Callbacks held until the host's next loop iteration calls ``run_pending``."""

    def __init__(self) -> None:
        self._pending: deque[Callable[[], None]] = deque()

    def call_soon(self, callback: Callable[[], None]) -> None:
        self._pending.append(callback)

    def __len__(self) -> int:
        return len(self._pending)

    def run_pending(self) -> int:
        # Callbacks queued while draining wait for the following iteration.
        batch = list(self._pending)
        self._pending.clear()
        for callback in batch:
            callback()
        if batch:
            logger.debug("Ran %d deferred callbacks", len(batch))
        return len(batch)


class EventLoopScheduler(Scheduler):
    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop

    def call_soon(self, callback: Callable[[], None]) -> None:
        self._loop.call_soon(callback)
