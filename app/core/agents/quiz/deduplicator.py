"""
Per-key coalescing of concurrent async work.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Dict, Hashable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class InFlightRequestDeduplicator:
    """
    Runs at most one computation per key at a time.

    Callers that arrive while a computation for their key is running share
    its outcome (result or exception). Entries are dropped as soon as the
    computation finishes, so nothing is cached: the next call after
    completion starts a fresh computation.
    """

    def __init__(self):
        self._pending: Dict[Hashable, "asyncio.Task"] = {}

    async def run(self, key: Hashable, factory: Callable[[], Awaitable[T]]) -> T:
        """
        Await the in-flight computation for ``key``, starting one if needed.

        Args:
            key: Coalescing key (a book id)
            factory: Zero-argument callable returning the awaitable to run

        Returns:
            The computation's result
        """
        # No await between lookup and registration: atomic on the event loop
        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._pending[key] = task
            task.add_done_callback(lambda done, k=key: self._release(k, done))
        else:
            logger.info(f"Joining in-flight request for key {key}")

        # A cancelled caller must not cancel the work other callers share
        return await asyncio.shield(task)

    def is_pending(self, key: Hashable) -> bool:
        return key in self._pending

    def __len__(self) -> int:
        return len(self._pending)

    def _release(self, key: Hashable, task: "asyncio.Task") -> None:
        if self._pending.get(key) is task:
            del self._pending[key]
        if not task.cancelled() and task.exception() is not None:
            logger.debug(f"In-flight request for key {key} failed: {task.exception()}")
