"""
User Decision Gate
==================
One-shot signal used to resume or abandon a stalled retry sequence.

The gate is handed to the on_waiting_for_user_decision hook. Whoever
holds it resolves it exactly once:

    def on_waiting(topic, call_id, retries, status, gate):
        dialog.ask("Retry?", on_answer=gate.resolve)
"""

import asyncio
from typing import Optional


class UserDecisionGate:
    """Single-resolution boolean future bound to the running event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop or asyncio.get_running_loop()
        self._future: asyncio.Future = self._loop.create_future()

    @property
    def pending(self) -> bool:
        """True until the gate is resolved or released."""
        return not self._future.done()

    @property
    def released(self) -> bool:
        return self._future.cancelled()

    def resolve(self, decision: bool) -> bool:
        """
        Resolve the gate.

        Returns:
            True if this call resolved the gate, False if it was
            already resolved or released.
        """
        if self._future.done():
            return False
        self._future.set_result(bool(decision))
        return True

    def retry(self) -> bool:
        return self.resolve(True)

    def abandon(self) -> bool:
        return self.resolve(False)

    def resolve_threadsafe(self, decision: bool) -> None:
        """Resolve from a thread other than the event loop's."""
        self._loop.call_soon_threadsafe(self.resolve, decision)

    def release(self) -> None:
        """Drop a pending gate without a decision."""
        if not self._future.done():
            self._future.cancel()

    async def wait(self) -> bool:
        """Wait for the first decision."""
        try:
            return await self._future
        finally:
            self.release()
