"""
Concurrency helpers for the scraping pipeline.

AdmissionGate bounds how many detail requests are in flight at once.
gather_all is the join point used by every stage: it keeps results in
dispatch order and fails as soon as one task fails.
"""

import asyncio
from typing import Any, Awaitable, Callable, Iterable, List, TypeVar
import logging

logger = logging.getLogger(__name__)

T = TypeVar('T')


class AdmissionGate:
    """
    Global admission gate for concurrent requests.

    One gate is shared by every task of a stage. Waiters are admitted in
    the order they arrived, so dispatch follows input order even though
    completion order does not.

    Usage:
        gate = AdmissionGate(15)

        async with gate:
            html = await crawler.fetch(url)

        # or
        html = await gate.run(lambda: crawler.fetch(url))
    """

    def __init__(self, limit: int):
        """
        Initialize the gate.

        Args:
            limit: Maximum number of tasks admitted at the same time

        Raises:
            ValueError: If limit is lower than 1
        """
        if limit < 1:
            raise ValueError(f"Admission limit must be at least 1, got {limit}")
        self.limit = limit
        self._semaphore = asyncio.Semaphore(limit)
        self._in_flight = 0
        self._peak = 0

    @property
    def in_flight(self) -> int:
        """Number of tasks currently holding a slot."""
        return self._in_flight

    @property
    def peak(self) -> int:
        """Highest number of simultaneous holders observed so far."""
        return self._peak

    async def __aenter__(self):
        await self._semaphore.acquire()
        self._in_flight += 1
        self._peak = max(self._peak, self._in_flight)
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self._in_flight -= 1
        self._semaphore.release()
        return False

    async def run(self, factory: Callable[[], Awaitable[T]]) -> T:
        """
        Wait for a free slot, then await the coroutine built by factory.

        The coroutine is only created once the slot is granted.
        """
        async with self:
            return await factory()


async def gather_all(aws: Iterable[Awaitable[Any]]) -> List[Any]:
    """
    Await every awaitable and return their results in dispatch order.

    If one of them fails, the others are cancelled and the first error
    is re-raised, so a stage either fully succeeds or fails as a whole.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    if not tasks:
        return []

    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        pending = [task for task in tasks if not task.done()]
        if pending:
            logger.debug(f"Cancelling {len(pending)} sibling task(s) after failure")
        for task in pending:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
