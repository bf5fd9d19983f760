"""
Resilient HTTP - Resilience
===========================
Retry, backoff and user-escalation policy for single async calls.

Each call walks an escalation cycle:

1. ATTEMPTING: the producer runs
2. BACKING_OFF: a retryable failure waits out the next interval
3. AWAITING_USER_DECISION: the budget is exhausted and a gate is offered
   to whoever handles on_waiting_for_user_decision

Usage:
    from resilient_http.resilience import ResilienceEngine, resolve_config

    config = resolve_config({"topic": "orders", "wait_for_user_decision": True})
    result = await ResilienceEngine(config, call_id).run(fetch_orders)
"""

# Re-export all public APIs
from .exceptions import (
    FailureKind,
    ResilienceConfigError,
    failure_status,
)

from .models import (
    CallContext,
    ResilienceConfig,
    ResilienceState,
    TopicConfig,
    TopicFlag,
)

from .config import (
    DEFAULT_RESILIENCE_CONFIG,
    resolve_config,
)

from .resolver import (
    get_fail_message,
    get_fail_response,
    is_retry_disabled,
    resolve_boolean,
    should_log_result,
    should_trace,
    should_wait_for_user_decision,
)

from .scheduler import DelayedRequestTimer, DelayScheduler
from .gate import UserDecisionGate
from .engine import ResilienceEngine

__all__ = [
    # Exceptions
    "FailureKind",
    "ResilienceConfigError",
    "failure_status",
    # Models
    "CallContext",
    "ResilienceConfig",
    "ResilienceState",
    "TopicConfig",
    "TopicFlag",
    # Config
    "DEFAULT_RESILIENCE_CONFIG",
    "resolve_config",
    # Resolver
    "get_fail_message",
    "get_fail_response",
    "is_retry_disabled",
    "resolve_boolean",
    "should_log_result",
    "should_trace",
    "should_wait_for_user_decision",
    # Scheduling
    "DelayedRequestTimer",
    "DelayScheduler",
    "UserDecisionGate",
    # Engine
    "ResilienceEngine",
]
