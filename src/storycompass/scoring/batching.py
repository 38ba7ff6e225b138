"""Bounded-concurrency helper for CPU-bound per-item work.

Runs a synchronous function on worker threads, at most ``max_concurrency``
at a time. Preserves input order in results.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

T = TypeVar("T")
Item = TypeVar("Item")


async def run_in_threads(
    items: Sequence[Item],
    fn: Callable[[Item], T],
    max_concurrency: int = 4,
) -> list[T]:
    """Apply ``fn`` to every item on worker threads.

    Args:
        items: Input items.
        fn: Synchronous function taking one item.
        max_concurrency: Maximum calls running at once (at least 1).

    Returns:
        Results in input order.

    Raises:
        Exception: The first exception raised by ``fn``; remaining calls
            still run to completion but their results are discarded.
    """
    if not items:
        return []

    semaphore = asyncio.Semaphore(max(1, max_concurrency))

    async def _run_one(item: Item) -> T:
        async with semaphore:
            return await asyncio.to_thread(fn, item)

    return list(await asyncio.gather(*(_run_one(item) for item in items)))
