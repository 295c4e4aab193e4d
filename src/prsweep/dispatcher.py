"""Bounded concurrent dispatch of per-notification work."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Dispatcher:
    """Runs one task per item, admitting at most ``concurrency`` into the worker at once.

    ``in_flight`` is the number of workers currently running and
    ``peak_in_flight`` the highest value it reached during :meth:`run`.
    """

    def __init__(self, concurrency: int) -> None:
        if concurrency < 1:
            msg = f"concurrency must be at least 1, got {concurrency}"
            raise ValueError(msg)
        self.concurrency = concurrency
        self.in_flight = 0
        self.peak_in_flight = 0

    async def run(self, items: Sequence[T], worker: Callable[[T], Awaitable[None]]) -> None:
        """Start a task per item and wait for all of them to finish."""
        gate = asyncio.Semaphore(self.concurrency)

        async def admit(item: T) -> None:
            async with gate:
                self.in_flight += 1
                self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
                try:
                    await worker(item)
                finally:
                    self.in_flight -= 1

        logger.debug("Dispatching %d items with concurrency %d", len(items), self.concurrency)
        await asyncio.gather(*(admit(item) for item in items))
