"""Polling expectations over live page state."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from pageflow.errors import PageAssertionError

DEFAULT_TIMEOUT = 5.0
DEFAULT_POLL_INTERVAL = 0.1


async def expect_eventually[T](
    observe: Callable[[], Awaitable[T]],
    predicate: Callable[[T], bool],
    *,
    message: str,
    expected: Any,
    timeout: float = DEFAULT_TIMEOUT,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> T:
    """Observe page state until predicate holds.

    Args:
        observe: Reads the current state from the page (a driver call)
        predicate: Decides whether the observed state is acceptable
        message: Assertion message used on failure
        expected: Expected state reported on failure
        timeout: Maximum wait time in seconds
        poll_interval: Seconds between observations

    Returns:
        The first observed value satisfying predicate

    Raises:
        PageAssertionError: With the last observed value once timeout elapses

    """
    deadline = asyncio.get_running_loop().time() + timeout

    while True:
        observed = await observe()
        if predicate(observed):
            return observed

        if asyncio.get_running_loop().time() >= deadline:
            raise PageAssertionError(message, expected=expected, observed=observed)

        await asyncio.sleep(poll_interval)
