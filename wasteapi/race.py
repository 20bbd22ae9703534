"""
Timeout race for slow backend operations.

Two tasks start together: the real work and a timer. Whichever settles
first decides the outcome. The losing work task is abandoned, not
cancelled: it may still finish in the background, but its result is
discarded.

The sleep function is injectable so tests can fire the timer instantly.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

from .errors import AnalysisTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")

SleepFn = Callable[[float], Awaitable[Any]]


class AbandonableTask:
    """
    asyncio task wrapper with an explicit abandon state.

    Abandoning keeps the task running but guarantees its outcome is
    consumed, so a late failure is logged instead of reported as an
    unretrieved exception.
    """

    def __init__(self, coro: Awaitable[T], name: Optional[str] = None):
        self.name = name or "task"
        self.task: asyncio.Future = asyncio.ensure_future(coro)
        self.abandoned = False

    def done(self) -> bool:
        return self.task.done()

    def cancel(self) -> None:
        self.task.cancel()

    def abandon(self) -> None:
        """Stop caring about the outcome without cancelling the work."""
        self.abandoned = True
        self.task.add_done_callback(self._discard)

    def _discard(self, task: asyncio.Future) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.debug(f"Abandoned {self.name} finished with {type(exc).__name__}: {exc}")
        else:
            logger.debug(f"Abandoned {self.name} finished; result discarded")


async def _timer(timeout_s: float, sleep: SleepFn) -> None:
    await sleep(timeout_s)


async def race_with_timeout(
    work: Awaitable[T],
    timeout_s: float,
    sleep: SleepFn = asyncio.sleep,
    name: str = "request",
) -> T:
    """
    Await ``work`` unless the timer settles first.

    Args:
        work: Awaitable producing the result
        timeout_s: Timer duration in seconds
        sleep: Coroutine function used for the timer
        name: Label used in logs

    Returns:
        Result of ``work`` if it settles first

    Raises:
        AnalysisTimeoutError: Timer settled first
        Exception: Whatever ``work`` raised, if it settled first
    """
    worker = AbandonableTask(work, name=name)
    timer = AbandonableTask(_timer(timeout_s, sleep), name="timer")

    try:
        done, _ = await asyncio.wait(
            {worker.task, timer.task},
            return_when=asyncio.FIRST_COMPLETED,
        )
    except asyncio.CancelledError:
        timer.cancel()
        worker.abandon()
        raise

    if worker.task in done:
        timer.cancel()
        return worker.task.result()

    worker.abandon()
    logger.warning(
        f"{name} lost the race against a {timeout_s:g}s timer",
        extra={"timeout_s": timeout_s},
    )
    raise AnalysisTimeoutError(timeout_s)
