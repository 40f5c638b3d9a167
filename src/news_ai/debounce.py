"""Debouncing of rapid topic selections."""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

SettleCallback = Callable[[str], Awaitable[None] | None]


class TopicDebouncer:
    """Coalesce rapid topic selections into a single settled topic.

    Each ``submit`` restarts the quiet-interval timer, so only the last value
    of a burst settles. ``close`` cancels the pending timer; nothing fires
    after close.

    Args:
        on_settle: Callback (sync or async) invoked with the settled topic.
        quiet_interval: Seconds without a new selection before settling.
    """

    def __init__(self, on_settle: SettleCallback, *, quiet_interval: float = 0.5) -> None:
        self._on_settle = on_settle
        self._quiet_interval = quiet_interval
        self._timer: asyncio.Task[None] | None = None
        self._pending_value: str | None = None
        self._running: set[asyncio.Task[None]] = set()
        self._closed = False

    @property
    def pending(self) -> bool:
        """Whether a settlement is scheduled."""
        return self._timer is not None and not self._timer.done()

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(self, value: str | None) -> None:
        """Record a topic selection; empty or None means no topic."""
        if self._closed:
            raise RuntimeError("TopicDebouncer is closed")
        self._cancel_timer()
        self._pending_value = value or ""
        self._timer = asyncio.ensure_future(self._wait_and_settle(self._pending_value))

    async def flush(self) -> None:
        """Settle the pending selection now instead of waiting out the interval."""
        if not self.pending:
            return
        value = self._pending_value or ""
        self._cancel_timer()
        await self._settle(value)

    def close(self) -> None:
        """Cancel any pending settlement and refuse further selections."""
        self._closed = True
        self._cancel_timer()
        for task in list(self._running):
            task.cancel()

    def _cancel_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    async def _wait_and_settle(self, value: str) -> None:
        await asyncio.sleep(self._quiet_interval)
        # The timer has fired: a new submit() starts a fresh timer instead of
        # cancelling this settlement.
        task = asyncio.current_task()
        if task is self._timer:
            self._timer = None
        if task is not None:
            self._running.add(task)
            task.add_done_callback(self._running.discard)
        await self._settle(value)

    async def _settle(self, value: str) -> None:
        if self._closed:
            return
        logger.debug("Topic settled: %r", value)
        result = self._on_settle(value)
        if inspect.isawaitable(result):
            await result
