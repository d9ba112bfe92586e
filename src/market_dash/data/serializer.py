"""FIFO request queue with at most one in-flight provider call."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _settle(task: "asyncio.Task[Any]") -> None:
    """Mark a queued task's outcome as retrieved so failures never leak."""
    if not task.cancelled():
        task.exception()


class RequestSerializer:
    """
    Run provider calls strictly one at a time, in enqueue order.

    The queue is a chain: each enqueued task waits for the previous tail to
    settle (success, failure or cancellation) and then becomes the new tail.
    The outcome of the previous task is never inspected, so one failure does
    not block the calls queued behind it.
    """

    def __init__(self) -> None:
        self._tail: asyncio.Task[Any] | None = None
        self._enqueued = 0

    @property
    def busy(self) -> bool:
        """True while a queued task has not settled."""
        return self._tail is not None and not self._tail.done()

    async def enqueue(self, task: Callable[[], Awaitable[T]]) -> T:
        """
        Queue a provider call and wait for its result.

        Order is fixed when enqueue is called. Cancelling the caller does not
        cancel the queued call; it still runs to completion in its slot.

        Args:
            task: Zero-argument callable returning an awaitable

        Returns:
            The task's result (its exception is re-raised)
        """
        previous = self._tail
        self._enqueued += 1
        position = self._enqueued

        async def run() -> T:
            if previous is not None and not previous.done():
                await asyncio.wait({previous})
            logger.debug(f"serializer: starting call #{position}")
            return await task()

        current = asyncio.ensure_future(run())
        current.add_done_callback(_settle)
        self._tail = current
        return await asyncio.shield(current)
