"""
Resilient HTTP Client
=====================
Async request wrapper with retry, backoff, slow-request notification,
user-gated escalation and failover responses.
"""

__version__ = "0.1.0"

# Resilience
from resilient_http.resilience import (
    DEFAULT_RESILIENCE_CONFIG,
    CallContext,
    DelayedRequestTimer,
    DelayScheduler,
    FailureKind,
    ResilienceConfig,
    ResilienceConfigError,
    ResilienceEngine,
    ResilienceState,
    TopicConfig,
    TopicFlag,
    UserDecisionGate,
    get_fail_message,
    get_fail_response,
    resolve_boolean,
    resolve_config,
    should_log_result,
    should_trace,
)

# HTTP
from resilient_http.http import (
    HttpResponse,
    HttpStatusError,
    HttpTransport,
    HttpxTransport,
    ResilientHttpClient,
)

# Logging
from resilient_http.log_config import setup_logging

__all__ = [
    # Resilience
    "DEFAULT_RESILIENCE_CONFIG",
    "CallContext",
    "DelayedRequestTimer",
    "DelayScheduler",
    "FailureKind",
    "ResilienceConfig",
    "ResilienceConfigError",
    "ResilienceEngine",
    "ResilienceState",
    "TopicConfig",
    "TopicFlag",
    "UserDecisionGate",
    "get_fail_message",
    "get_fail_response",
    "resolve_boolean",
    "resolve_config",
    "should_log_result",
    "should_trace",
    # HTTP
    "HttpResponse",
    "HttpStatusError",
    "HttpTransport",
    "HttpxTransport",
    "ResilientHttpClient",
    # Logging
    "setup_logging",
]
