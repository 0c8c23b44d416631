"""
Wait utilities for polling page state.
"""

import asyncio
import time
from typing import Any, Awaitable, Callable
import logging

logger = logging.getLogger(__name__)


async def wait_for_condition(
    condition: Callable[[], Awaitable[bool]],
    timeout_ms: int = 10000,
    interval_ms: int = 500,
) -> None:
    """
    Poll an async condition until it returns True.

    Args:
        condition: Async callable returning a bool
        timeout_ms: Give up after this many milliseconds
        interval_ms: Delay between polls

    Raises:
        asyncio.TimeoutError if the condition is not met in time

    Example:
        >>> await wait_for_condition(lambda: dashboard.is_logged_in(), timeout_ms=15000)
    """
    deadline = time.monotonic() + timeout_ms / 1000

    while True:
        if await condition():
            return
        if time.monotonic() >= deadline:
            break
        await asyncio.sleep(interval_ms / 1000)

    raise asyncio.TimeoutError(f"Condition not met within {timeout_ms}ms")


async def with_timeout(
    coro: Any,
    timeout_seconds: float,
    error_message: str = "Operation timed out",
) -> Any:
    """
    Execute a coroutine with a timeout.

    Args:
        coro: Coroutine to execute
        timeout_seconds: Timeout in seconds
        error_message: Message for timeout error

    Returns:
        Coroutine result

    Raises:
        asyncio.TimeoutError if timeout is exceeded
    """
    try:
        return await asyncio.wait_for(coro, timeout=timeout_seconds)
    except asyncio.TimeoutError:
        raise asyncio.TimeoutError(error_message)
