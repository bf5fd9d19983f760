"""
Resilient HTTP Client
=====================
Per-call orchestration around the resilience engine.

Example:
    async with HttpxTransport(base_url="http://orders:8000") as transport:
        client = ResilientHttpClient(transport)
        orders = await client.get(
            "/v1/orders",
            {"topic": "orders", "on_request_delayed": show_spinner},
            params={"page": 1},
        )
"""

import asyncio
import time
import uuid
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

import structlog

from ..resilience.config import DEFAULT_RESILIENCE_CONFIG, resolve_config
from ..resilience.engine import ResilienceEngine
from ..resilience.models import CallContext, ResilienceConfig
from ..resilience.resolver import get_fail_response, should_log_result, should_trace
from ..resilience.scheduler import DelayScheduler
from .models import HttpResponse
from .transport import HttpTransport

logger = structlog.get_logger(__name__)

ConfigOverrides = Optional[Union[ResilienceConfig, Mapping[str, Any]]]


def generate_call_id() -> str:
    return str(uuid.uuid4())


class ResilientHttpClient:
    """
    Issues requests through an HttpTransport with a resilience policy.

    Every call gets its own id, delayed-request timer, retry state and
    lifecycle events. The transport envelope is unwrapped to its body.
    """

    def __init__(
        self,
        transport: HttpTransport,
        defaults: ResilienceConfig = DEFAULT_RESILIENCE_CONFIG,
        id_factory: Callable[[], str] = generate_call_id,
        scheduler: Optional[DelayScheduler] = None,
    ):
        self.transport = transport
        self.defaults = defaults
        self.id_factory = id_factory
        self.scheduler = scheduler or DelayScheduler()

    async def invoke(
        self,
        operation: Callable[[], Awaitable[HttpResponse]],
        resilience_config: ConfigOverrides = None,
    ) -> Any:
        """
        Run operation under the resilience policy.

        Args:
            operation: Zero-argument coroutine function returning an envelope
                with a ``body``; called once per attempt
            resilience_config: Overrides merged over the client defaults

        Returns:
            The unwrapped body, or the topic's on_fail_response on
            terminal failure

        Raises:
            The terminal failure when no failover response is configured,
            or any exception raised by a lifecycle hook
        """
        config = resolve_config(resilience_config, self.defaults)
        topic = config.topic
        context = CallContext(id=self.id_factory(), topic=topic)
        call_id = context.id

        context.delay_timer = self.scheduler.start_timer(
            config.is_delayed_after_ms,
            lambda: config.on_request_delayed(topic, call_id),
        )
        context.started_at = time.monotonic()

        engine = ResilienceEngine(config, call_id, scheduler=self.scheduler, context=context)
        cancelled = False
        try:
            config.on_request_start(topic, call_id)
            response = await engine.run(operation)
        except asyncio.CancelledError:
            cancelled = True
            logger.debug(
                "request_cancelled",
                topic=topic,
                call_id=call_id,
                state=engine.state.value,
            )
            raise
        except Exception as exc:
            fail_response = get_fail_response(config)
            # Hook errors are not terminal failures and are never substituted
            if fail_response is None or exc is not engine.terminal_error:
                raise
            logger.info("request_failover", topic=topic, call_id=call_id)
            return fail_response
        else:
            result = response.body
            if should_log_result(config):
                logger.info("request_result", topic=topic, result=result)
            return result
        finally:
            if cancelled:
                context.delay_timer.cancel()
            else:
                self._finalize(config, context)

    def _finalize(self, config: ResilienceConfig, context: CallContext) -> None:
        if should_trace(config):
            logger.info(
                "fetch_time",
                topic=config.topic,
                call_id=context.id,
                elapsed_ms=round(context.elapsed_ms, 3),
            )
        try:
            config.on_request_finalize(config.topic, context.id)
        finally:
            context.delay_timer.cancel()

    async def request(
        self,
        method: str,
        url: str,
        resilience_config: ConfigOverrides = None,
        **options: Any,
    ) -> Any:
        """Issue ``method url`` through the transport with the resilience policy."""
        async def operation() -> HttpResponse:
            return await self.transport.request(method, url, **options)

        return await self.invoke(operation, resilience_config)

    async def get(self, url: str, resilience_config: ConfigOverrides = None, **options: Any) -> Any:
        return await self.request("GET", url, resilience_config, **options)

    async def post(self, url: str, resilience_config: ConfigOverrides = None, **options: Any) -> Any:
        return await self.request("POST", url, resilience_config, **options)

    async def put(self, url: str, resilience_config: ConfigOverrides = None, **options: Any) -> Any:
        return await self.request("PUT", url, resilience_config, **options)

    async def patch(self, url: str, resilience_config: ConfigOverrides = None, **options: Any) -> Any:
        return await self.request("PATCH", url, resilience_config, **options)

    async def delete(self, url: str, resilience_config: ConfigOverrides = None, **options: Any) -> Any:
        return await self.request("DELETE", url, resilience_config, **options)
