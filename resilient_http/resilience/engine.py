"""
Resilience Engine
=================
Retry / backoff / user-escalation state machine around one async producer.

States:

1. ATTEMPTING: the producer is running
2. BACKING_OFF: waiting out the next backoff interval
3. AWAITING_USER_DECISION: retry budget exhausted, waiting on a gate
4. SUCCEEDED / FAILED: outcome fixed

Usage:
    engine = ResilienceEngine(config, call_id)
    result = await engine.run(lambda: transport.request("GET", url))
"""

from typing import Awaitable, Callable, NoReturn, Optional, TypeVar

import structlog

from .exceptions import FailureKind, failure_status
from .gate import UserDecisionGate
from .models import CallContext, ResilienceConfig, ResilienceState
from .resolver import get_fail_message, is_retry_disabled, should_wait_for_user_decision
from .scheduler import DelayScheduler

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class ResilienceEngine:
    """
    Layers the retry policy of a ResilienceConfig on top of a producer.

    A producer is a zero-argument callable returning a fresh awaitable
    for every attempt. Failures must expose a ``status`` attribute to be
    considered for retry.
    """

    def __init__(
        self,
        config: ResilienceConfig,
        call_id: str,
        scheduler: Optional[DelayScheduler] = None,
        context: Optional[CallContext] = None,
    ):
        self.config = config
        self.scheduler = scheduler or DelayScheduler()
        self.context = context or CallContext(id=call_id, topic=config.topic)
        self.state = ResilienceState.ATTEMPTING
        self.last_failure_kind: Optional[FailureKind] = None
        # Set only once on_fail has been emitted for the failure
        self.terminal_error: Optional[Exception] = None

    @property
    def call_id(self) -> str:
        return self.context.id

    @property
    def retry_count(self) -> int:
        return self.context.retry_count

    def wrap(self, producer: Callable[[], Awaitable[T]]) -> Callable[[], Awaitable[T]]:
        """Return a producer with identical success shape and the retry policy applied."""
        async def resilient() -> T:
            return await self.run(producer)
        return resilient

    async def run(self, producer: Callable[[], Awaitable[T]]) -> T:
        """Drive attempts until success or terminal failure."""
        while True:
            self.state = ResilienceState.ATTEMPTING
            try:
                result = await producer()
            except Exception as exc:
                await self._on_failure(exc)
                continue
            self.state = ResilienceState.SUCCEEDED
            return result

    async def _on_failure(self, exc: Exception) -> None:
        """Return to retry; raise exc for a terminal failure."""
        config = self.config
        status = failure_status(exc)

        if is_retry_disabled(config) or status not in config.retry_on_status_codes:
            self._fail(exc, status, FailureKind.NON_RETRYABLE)

        self.context.retry_count += 1
        retries = self.context.retry_count
        intervals = config.retry_intervals_ms

        if retries <= len(intervals):
            delay_ms = intervals[retries - 1]
            self.last_failure_kind = FailureKind.RETRYABLE
            self.state = ResilienceState.BACKING_OFF
            logger.warning(
                "request_retry",
                topic=config.topic,
                call_id=self.call_id,
                retry=retries,
                delay_ms=delay_ms,
                status=status,
            )
            config.on_request_retry(config.topic, self.call_id, retries, delay_ms, status)
            await self.scheduler.sleep(delay_ms)
            return

        # Budget exhausted, the next failure starts a new escalation cycle
        self.context.retry_count = 0
        self.last_failure_kind = FailureKind.ESCALATED

        if not should_wait_for_user_decision(config):
            self._fail(exc, status, FailureKind.ESCALATED)

        if await self._await_user_decision(retries, status):
            logger.info(
                "request_retry_by_user",
                topic=config.topic,
                call_id=self.call_id,
                retry=retries,
                status=status,
            )
            # User-requested retries run immediately, there is no interval to report
            config.on_request_retry(config.topic, self.call_id, retries, None, status)
            return

        self._fail(exc, status, FailureKind.USER_CANCELLED)

    async def _await_user_decision(self, retries: int, status: Optional[int]) -> bool:
        config = self.config
        gate = UserDecisionGate()
        self.context.decision_gate = gate
        self.state = ResilienceState.AWAITING_USER_DECISION
        logger.info(
            "request_waiting_for_user_decision",
            topic=config.topic,
            call_id=self.call_id,
            retries=retries,
            status=status,
        )
        try:
            config.on_waiting_for_user_decision(config.topic, self.call_id, retries, status, gate)
            return await gate.wait()
        finally:
            self.context.decision_gate = None

    def _fail(self, exc: Exception, status: Optional[int], kind: FailureKind) -> NoReturn:
        config = self.config
        self.state = ResilienceState.FAILED
        self.last_failure_kind = kind
        logger.warning(
            "request_failed",
            topic=config.topic,
            call_id=self.call_id,
            status=status,
            kind=kind.value,
            error=str(exc),
        )
        config.on_fail(config.topic, self.call_id, get_fail_message(config))
        self.terminal_error = exc
        raise exc
