"""
Bounded polling.

Wait-and-recheck loop shared by the scene batch orchestrator and the
blocking single-shot video flows: tick on a fixed interval until the tick
reports a result or the attempt ceiling is reached.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class PollOutcome(Generic[T]):
    """Result of a bounded poll."""

    value: Optional[T]
    attempts: int
    timed_out: bool


async def poll_until(
    tick: Callable[[int], Awaitable[Optional[T]]],
    interval: float,
    max_attempts: int,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
) -> PollOutcome[T]:
    """
    Call tick(attempt) every `interval` seconds until it returns non-None.

    The first tick runs after one interval. Exceptions raised by tick
    propagate; callers that want retry-by-polling handle them inside tick.

    Args:
        tick: Coroutine function receiving the 1-based attempt number
        interval: Seconds to wait before each tick
        max_attempts: Maximum number of ticks
        sleep: Sleep function (injectable for tests)

    Returns:
        PollOutcome with the tick's value, or timed_out=True
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    for attempt in range(1, max_attempts + 1):
        await sleep(interval)
        value = await tick(attempt)
        if value is not None:
            return PollOutcome(value=value, attempts=attempt, timed_out=False)

    return PollOutcome(value=None, attempts=max_attempts, timed_out=True)
