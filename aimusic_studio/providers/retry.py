"""Retry helper for flaky provider calls."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

from aimusic_studio.core.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[None]]


async def retry_api_call(
    fn: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    delay: float = 2.0,
    *,
    sleep: Optional[SleepFunc] = None,
) -> T:
    """Call ``fn`` until it succeeds, at most ``max_retries`` times.

    The wait before retry ``n`` is ``delay * n`` seconds (linear backoff). The
    error of the last attempt is re-raised when every attempt fails.

    Args:
        fn: Zero-argument coroutine function performing the call.
        max_retries: Total number of attempts (at least 1).
        delay: Base delay in seconds.
        sleep: Awaitable sleep used between attempts; ``asyncio.sleep`` by default.

    Returns:
        The first successful result of ``fn``.
    """
    if max_retries < 1:
        raise ValueError("max_retries must be at least 1")
    sleep = sleep or asyncio.sleep

    for attempt in range(1, max_retries):
        try:
            return await fn()
        except Exception as e:
            logger.warning(f"API call attempt {attempt}/{max_retries} failed: {e}")
            await sleep(delay * attempt)

    return await fn()
