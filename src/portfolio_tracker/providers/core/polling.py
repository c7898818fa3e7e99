"""Cancellable recurring fetch with a built-in liveness guard."""
import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_INTERVAL_SECONDS = 300.0


class PollingTask(Generic[T]):
    """Fetch on start, then every interval_seconds, until stop() is called.

    Results are handed to on_result. A fetch that resolves after stop() (or
    after a restart) is discarded instead of being delivered, so consumers
    never see updates once they have torn down.
    """

    def __init__(
        self,
        name: str,
        fetch: Callable[[], Awaitable[T]],
        on_result: Callable[[T], None],
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
    ) -> None:
        self.name = name
        self._fetch = fetch
        self._on_result = on_result
        self._interval = interval_seconds
        self._task: asyncio.Task | None = None
        self._stop_event: asyncio.Event | None = None
        self._generation = 0
        self._closed = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the polling loop on the running event loop. No-op if already running."""
        if self.running:
            return
        self._closed = False
        self._generation += 1
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(
            self._run(self._stop_event), name=f"poll:{self.name}"
        )

    async def stop(self) -> None:
        """Cancel the loop; any in-flight result is discarded."""
        self._closed = True
        if self._stop_event is not None:
            self._stop_event.set()
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def run_once(self) -> bool:
        """Fetch immediately. Returns False if the result arrived after stop()."""
        generation = self._generation
        result = await self._fetch()
        if self._closed or generation != self._generation:
            logger.debug("Discarding late result for %s", self.name)
            return False
        self._on_result(result)
        return True

    async def _run(self, stop_event: asyncio.Event) -> None:
        while not stop_event.is_set():
            try:
                result = await self._fetch()
            except Exception:  # pylint: disable=broad-except
                logger.exception("Polling %s failed", self.name)
            else:
                if stop_event.is_set():
                    logger.debug("Discarding late result for %s", self.name)
                    return
                self._on_result(result)
            with contextlib.suppress(asyncio.TimeoutError):
                await asyncio.wait_for(stop_event.wait(), timeout=self._interval)
