"""Capped exponential backoff for provider calls."""
import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ExponentialBackoff:
    """Delays of base * multiplier^attempt, capped at max_delay.

    Call reset() after a successful operation to zero the attempt counter.
    """

    def __init__(
        self,
        base_delay: float = 1.0,
        max_delay: float = 8.0,
        multiplier: float = 2.0,
    ) -> None:
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.multiplier = multiplier
        self._attempt = 0

    @property
    def attempt(self) -> int:
        return self._attempt

    def next_delay(self) -> float:
        """Return the next delay and increment the attempt counter."""
        delay = min(self.base_delay * (self.multiplier**self._attempt), self.max_delay)
        self._attempt += 1
        return delay

    def reset(self) -> None:
        self._attempt = 0


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    *,
    max_attempts: int = 3,
    backoff: ExponentialBackoff | None = None,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    label: str = "operation",
) -> T:
    """Await operation() up to max_attempts times, sleeping between failures.

    The last exception is re-raised; nothing is queued for later.
    """
    backoff = backoff or ExponentialBackoff()
    for attempt in range(1, max_attempts + 1):
        try:
            return await operation()
        except retry_on as exc:
            if attempt >= max_attempts:
                raise
            delay = backoff.next_delay()
            logger.info(
                "%s failed (attempt %d/%d): %s; retrying in %.1fs",
                label,
                attempt,
                max_attempts,
                exc,
                delay,
            )
            await asyncio.sleep(delay)
    raise RuntimeError("max_attempts must be >= 1")
