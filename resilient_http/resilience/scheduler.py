"""
Delay Scheduler
===============
Cancellable "request is slow" timer and backoff waits.
"""

import asyncio
from typing import Callable, Optional

import structlog

logger = structlog.get_logger(__name__)


class DelayedRequestTimer:
    """
    One-shot timer that fires a callback unless cancelled first.

    Example:
        timer = DelayedRequestTimer(5000, lambda: print("slow"))
        timer.start()
        ...
        timer.cancel()
    """

    def __init__(self, delay_ms: float, callback: Callable[[], None]):
        self.delay_ms = delay_ms
        self._callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None
        self._fired = False
        self._cancelled = False

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def start(self) -> "DelayedRequestTimer":
        """Schedule the timer on the running event loop."""
        if self._handle is not None or self._cancelled:
            return self
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay_ms / 1000, self._fire)
        return self

    def _fire(self) -> None:
        if self._cancelled or self._fired:
            return
        self._fired = True
        try:
            self._callback()
        except Exception:
            # Runs outside the call's task, nothing to propagate to
            logger.exception("delayed_request_hook_failed", delay_ms=self.delay_ms)

    def cancel(self) -> None:
        """Cancel the timer. No-op if already fired or cancelled."""
        if self._cancelled:
            return
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class DelayScheduler:
    """Creates delay timers and performs backoff waits."""

    def start_timer(self, delay_ms: float, callback: Callable[[], None]) -> DelayedRequestTimer:
        return DelayedRequestTimer(delay_ms, callback).start()

    async def sleep(self, delay_ms: float) -> None:
        """Suspend the current task for delay_ms milliseconds."""
        await asyncio.sleep(delay_ms / 1000)
