"""
Resilience Exceptions
=====================
Exception classes and failure taxonomy for resilient calls.
"""

from enum import Enum
from typing import Any, Optional


class ResilienceConfigError(ValueError):
    """Raised when a resilience configuration is invalid."""
    pass


class FailureKind(str, Enum):
    """Classification of a failed attempt."""
    NON_RETRYABLE = "non_retryable"    # Status not retryable, or retry disabled
    RETRYABLE = "retryable"            # Drives the backoff loop
    ESCALATED = "escalated"            # Retry budget exhausted
    USER_CANCELLED = "user_cancelled"  # User decided to abandon


def failure_status(exc: BaseException) -> Optional[int]:
    """Return the status code carried by a failure, or None."""
    status: Any = getattr(exc, "status", None)
    if isinstance(status, bool) or not isinstance(status, int):
        return None
    return status
