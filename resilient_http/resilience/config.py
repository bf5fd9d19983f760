"""
Resilience Configuration
========================
Global defaults and per-call config merging.

Defaults can be tuned per deployment through the environment:

    RESILIENCE_IS_DELAYED_AFTER_MS=5000
    RESILIENCE_RETRY_INTERVALS_MS=0,200,500,1000,1000
    RESILIENCE_RETRY_STATUS_CODES=408,423,429,500,502,503,504
    RESILIENCE_TRACE=true
"""

import dataclasses
import os
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Tuple, Union

from .exceptions import ResilienceConfigError
from .models import ResilienceConfig, TopicConfig


def _env_int_list(name: str, default: str) -> Tuple[int, ...]:
    raw = os.getenv(name, default)
    return tuple(int(part) for part in raw.split(",") if part.strip())


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# Configuration from environment
IS_DELAYED_AFTER_MS = int(os.getenv("RESILIENCE_IS_DELAYED_AFTER_MS", "3000"))
RETRY_INTERVALS_MS = _env_int_list("RESILIENCE_RETRY_INTERVALS_MS", "0,200,500,1000,1000")
RETRY_ON_STATUS_CODES: FrozenSet[int] = frozenset(
    _env_int_list("RESILIENCE_RETRY_STATUS_CODES", "408,423,429,500,502,503,504")
)
TRACE = _env_bool("RESILIENCE_TRACE")
LOG_RESULT = _env_bool("RESILIENCE_LOG_RESULT")

DEFAULT_RESILIENCE_CONFIG = ResilienceConfig(
    is_delayed_after_ms=IS_DELAYED_AFTER_MS,
    retry_on_status_codes=RETRY_ON_STATUS_CODES,
    retry_intervals_ms=RETRY_INTERVALS_MS,
    trace=TRACE,
    log_result=LOG_RESULT,
)

_FIELD_NAMES = frozenset(f.name for f in dataclasses.fields(ResilienceConfig))
_TOPIC_FIELD_NAMES = frozenset(f.name for f in dataclasses.fields(TopicConfig))


def _to_topic_config(topic: str, value: Union[TopicConfig, Mapping[str, Any]]) -> TopicConfig:
    if isinstance(value, TopicConfig):
        return value
    unknown = set(value) - _TOPIC_FIELD_NAMES
    if unknown:
        raise ResilienceConfigError(
            f"Unknown topic config keys for '{topic}': {sorted(unknown)}"
        )
    return TopicConfig(**value)


def _non_negative(name: str, values: Iterable[int]) -> None:
    for value in values:
        if value < 0:
            raise ResilienceConfigError(f"{name} must not be negative, got {value}")


def resolve_config(
    overrides: Optional[Union[ResilienceConfig, Mapping[str, Any]]] = None,
    defaults: ResilienceConfig = DEFAULT_RESILIENCE_CONFIG,
) -> ResilienceConfig:
    """
    Merge caller overrides over the defaults into one effective config.

    Topic overrides are kept as-is and applied at read time by the
    resolver functions.

    Args:
        overrides: Partial mapping of ResilienceConfig fields, or a
            complete ResilienceConfig which then replaces the defaults
        defaults: Base configuration

    Returns:
        Normalised, immutable ResilienceConfig

    Raises:
        ResilienceConfigError: On unknown keys or negative durations
    """
    if isinstance(overrides, ResilienceConfig):
        base, changes = overrides, {}
    else:
        base, changes = defaults, dict(overrides or {})

    unknown = set(changes) - _FIELD_NAMES
    if unknown:
        raise ResilienceConfigError(f"Unknown resilience config keys: {sorted(unknown)}")

    merged = dataclasses.replace(base, **changes)

    normalised: Dict[str, Any] = {
        "retry_on_status_codes": frozenset(merged.retry_on_status_codes),
        "retry_intervals_ms": tuple(merged.retry_intervals_ms),
        "topic_to_config": {
            topic: _to_topic_config(topic, value)
            for topic, value in (merged.topic_to_config or {}).items()
        },
    }
    _non_negative("is_delayed_after_ms", [merged.is_delayed_after_ms])
    _non_negative("retry_intervals_ms", normalised["retry_intervals_ms"])

    return dataclasses.replace(merged, **normalised)
