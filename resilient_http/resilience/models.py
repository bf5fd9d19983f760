"""
Resilience Models
=================
Data models and enums for resilient calls.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, FrozenSet, Mapping, Optional, Tuple

if TYPE_CHECKING:
    from .gate import UserDecisionGate
    from .scheduler import DelayedRequestTimer


def _noop(*args: Any) -> None:
    return None


class TopicFlag(str, Enum):
    """Boolean settings that a topic may override."""
    DISABLE_RETRY = "disable_retry"
    WAIT_FOR_USER_DECISION = "wait_for_user_decision"
    LOG_RESULT = "log_result"
    TRACE = "trace"


class ResilienceState(str, Enum):
    """States of the resilience engine."""
    ATTEMPTING = "attempting"
    BACKING_OFF = "backing_off"
    AWAITING_USER_DECISION = "awaiting_user_decision"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class TopicConfig:
    """
    Per-topic overrides.

    Booleans left as None fall back to the global value.
    on_fail_response, when set, replaces a terminal failure.
    """
    disable_retry: Optional[bool] = None
    wait_for_user_decision: Optional[bool] = None
    log_result: Optional[bool] = None
    trace: Optional[bool] = None
    on_fail_message: Optional[str] = None
    on_fail_response: Any = None


@dataclass(frozen=True)
class ResilienceConfig:
    """Effective policy for a single call."""
    topic: str = "default"
    disable_retry: bool = False
    wait_for_user_decision: bool = False
    retry_on_status_codes: FrozenSet[int] = frozenset()
    is_delayed_after_ms: int = 3000
    retry_intervals_ms: Tuple[int, ...] = ()
    log_result: bool = False
    trace: bool = False
    topic_to_config: Mapping[str, TopicConfig] = field(default_factory=dict)

    # Lifecycle hooks
    on_request_start: Callable[..., None] = _noop
    on_request_delayed: Callable[..., None] = _noop
    on_request_retry: Callable[..., None] = _noop
    on_waiting_for_user_decision: Callable[..., None] = _noop
    on_fail: Callable[..., None] = _noop
    on_request_finalize: Callable[..., None] = _noop


@dataclass
class CallContext:
    """Mutable state owned by one invocation."""
    id: str
    topic: str
    started_at: float = field(default_factory=time.monotonic)
    retry_count: int = 0
    delay_timer: Optional["DelayedRequestTimer"] = None
    decision_gate: Optional["UserDecisionGate"] = None

    @property
    def elapsed_ms(self) -> float:
        return (time.monotonic() - self.started_at) * 1000
