"""
Bounded concurrent execution of async work over a list of items.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import Generic, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class BoundedBatchRunner(Generic[T, R]):
    """
    Runs one unit of work per item with at most `limit` in flight.

    Results come back in input order: each task writes into the slot of its
    item's index, so completion order never leaks into the result list.
    A unit of work that raises fails the whole run and cancels the rest.
    """

    def __init__(self, limit: int):
        if limit < 1:
            raise ValueError(f"Concurrency limit must be at least 1, got {limit}")
        self._limit = limit
        self._in_flight = 0
        self._peak_in_flight = 0

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def in_flight(self) -> int:
        """Units of work currently running."""
        return self._in_flight

    @property
    def peak_in_flight(self) -> int:
        """Highest number of concurrently running units seen so far."""
        return self._peak_in_flight

    async def run(
        self,
        items: Sequence[T],
        unit_of_work: Callable[[T], Awaitable[R]],
    ) -> list[R]:
        """
        Apply `unit_of_work` to every item.

        Args:
            items: Work items.
            unit_of_work: Coroutine function called once per item.

        Returns:
            List where `results[i]` is the result for `items[i]`.
        """
        semaphore = asyncio.Semaphore(self._limit)
        results: list[R | None] = [None] * len(items)

        async def process(index: int, item: T) -> None:
            async with semaphore:
                self._in_flight += 1
                self._peak_in_flight = max(self._peak_in_flight, self._in_flight)
                try:
                    results[index] = await unit_of_work(item)
                finally:
                    self._in_flight -= 1

        tasks = [asyncio.ensure_future(process(i, item)) for i, item in enumerate(items)]
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        return results  # type: ignore[return-value]
