"""
Shared test fixtures
====================
Scripted transport, recording lifecycle hooks and a non-sleeping scheduler.
"""

import asyncio
from typing import Any, List, Optional

import pytest

from resilient_http.http import HttpResponse, HttpStatusError
from resilient_http.resilience import DelayScheduler

RETRY_INTERVALS = (0, 200, 500, 1000, 1000)
RETRY_STATUS_CODES = (408, 423, 429, 500, 502, 503, 504)


class MockTransport:
    """
    Scripted HttpTransport.

    Failures are consumed first, then results. Each result may be
    delayed by the next entry of the delay list (seconds).
    """

    def __init__(self):
        self.results: List[Any] = []
        self.failures: List[Any] = []
        self.delays: List[float] = []
        self.calls: List[tuple] = []

    def set_next_result(self, body: Any) -> None:
        self.results = [body]

    def set_next_delay(self, seconds: float) -> None:
        self.delays = [seconds]

    def set_fail_on_next_request_list(self, failures: List[Any]) -> None:
        """Statuses (int) or exception instances to raise, in order."""
        self.failures = list(failures)

    async def request(self, method: str, url: str, **options: Any) -> HttpResponse:
        self.calls.append((method, url, options))

        if self.failures:
            failure = self.failures.pop(0)
            if isinstance(failure, BaseException):
                raise failure
            raise HttpStatusError("Mock failure", status=failure, url=url)

        if not self.results:
            raise AssertionError("MockTransport has no specified result set. Check your test setup!")

        delay = self.delays.pop(0) if self.delays else 0
        if delay:
            await asyncio.sleep(delay)
        return HttpResponse(status=200, body=self.results.pop(0), url=url)


class RecordingHooks:
    """Collects lifecycle events in emission order."""

    def __init__(self):
        self.events: List[tuple] = []
        self.gates: list = []

    def on_request_start(self, topic, call_id):
        self.events.append(("start", topic, call_id))

    def on_request_delayed(self, topic, call_id):
        self.events.append(("delayed", topic, call_id))

    def on_request_retry(self, topic, call_id, retry_count, next_retry_ms, status):
        self.events.append(("retry", topic, call_id, retry_count, next_retry_ms, status))

    def on_waiting_for_user_decision(self, topic, call_id, retry_count, status, gate):
        self.gates.append(gate)
        self.events.append(("waiting", topic, call_id, retry_count, status))

    def on_fail(self, topic, call_id, message):
        self.events.append(("fail", topic, call_id, message))

    def on_request_finalize(self, topic, call_id):
        self.events.append(("finalize", topic, call_id))

    def config(self, **overrides: Any) -> dict:
        """Resilience overrides wired to this recorder."""
        config = {
            "topic": "TEST",
            "retry_on_status_codes": RETRY_STATUS_CODES,
            "retry_intervals_ms": RETRY_INTERVALS,
            "on_request_start": self.on_request_start,
            "on_request_delayed": self.on_request_delayed,
            "on_request_retry": self.on_request_retry,
            "on_waiting_for_user_decision": self.on_waiting_for_user_decision,
            "on_fail": self.on_fail,
            "on_request_finalize": self.on_request_finalize,
        }
        config.update(overrides)
        return config

    def of(self, name: str) -> List[tuple]:
        return [event for event in self.events if event[0] == name]

    def names(self) -> List[str]:
        return [event[0] for event in self.events]

    async def wait_for_gates(self, count: int = 1, timeout: float = 2.0) -> None:
        async def poll():
            while len(self.gates) < count:
                await asyncio.sleep(0)
        await asyncio.wait_for(poll(), timeout)


class RecordingScheduler(DelayScheduler):
    """Records backoff waits without sleeping."""

    def __init__(self, events: Optional[list] = None):
        self.waits: List[float] = []
        self.events = events

    async def sleep(self, delay_ms: float) -> None:
        self.waits.append(delay_ms)
        if self.events is not None:
            self.events.append(("sleep", delay_ms))
        await asyncio.sleep(0)


@pytest.fixture
def hooks() -> RecordingHooks:
    return RecordingHooks()


@pytest.fixture
def scheduler(hooks) -> RecordingScheduler:
    return RecordingScheduler(hooks.events)


@pytest.fixture
def transport() -> MockTransport:
    return MockTransport()
