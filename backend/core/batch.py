"""Parallel map with per-item failure isolation."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Iterable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_TIMEOUT = 10.0


async def gather_successes(
    items: Iterable[T],
    fn: Callable[[T], Awaitable[R | None]],
    timeout: float | None = DEFAULT_TIMEOUT,
) -> list[R]:
    """Run ``fn`` on every item concurrently and keep only the successes.

    An item is dropped when ``fn`` returns None, raises, or exceeds
    ``timeout`` seconds. Siblings are never cancelled by one failure.
    Results are returned in completion order.
    """
    results: list[R] = []

    async def _run(item: T) -> None:
        try:
            result = await asyncio.wait_for(fn(item), timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Timed out after {timeout}s for {item!r}")
            return
        except Exception as e:
            logger.warning(f"Failed for {item!r}: {e}")
            return
        if result is not None:
            results.append(result)

    await asyncio.gather(*(_run(item) for item in items))
    return results
