"""
Topic Resolver
==============
Topic-scoped lookups over a resolved ResilienceConfig.
"""

from typing import Any, Optional, Union

from .exceptions import ResilienceConfigError
from .models import ResilienceConfig, TopicConfig, TopicFlag


def _topic_config(config: ResilienceConfig, topic: Optional[str]) -> Optional[TopicConfig]:
    return config.topic_to_config.get(config.topic if topic is None else topic)


def resolve_boolean(
    config: ResilienceConfig,
    property_name: Union[TopicFlag, str],
    topic: Optional[str] = None,
) -> bool:
    """
    Return the topic override for a flag, or the global value.

    Args:
        config: Resolved config
        property_name: One of the TopicFlag values
        topic: Topic to look up; defaults to config.topic
    """
    try:
        flag = TopicFlag(property_name)
    except ValueError:
        raise ResilienceConfigError(f"'{property_name}' is not a topic flag") from None

    topic_config = _topic_config(config, topic)
    if topic_config is not None:
        value = getattr(topic_config, flag.value)
        if value is not None:
            return value
    return getattr(config, flag.value)


def is_retry_disabled(config: ResilienceConfig) -> bool:
    return resolve_boolean(config, TopicFlag.DISABLE_RETRY)


def should_wait_for_user_decision(config: ResilienceConfig) -> bool:
    return resolve_boolean(config, TopicFlag.WAIT_FOR_USER_DECISION)


def should_log_result(config: ResilienceConfig) -> bool:
    return resolve_boolean(config, TopicFlag.LOG_RESULT)


def should_trace(config: ResilienceConfig) -> bool:
    return resolve_boolean(config, TopicFlag.TRACE)


def get_fail_message(config: ResilienceConfig, topic: Optional[str] = None) -> str:
    """Topic-specific on_fail message, or empty string."""
    topic_config = _topic_config(config, topic)
    if topic_config is None or not topic_config.on_fail_message:
        return ""
    return topic_config.on_fail_message


def get_fail_response(config: ResilienceConfig, topic: Optional[str] = None) -> Any:
    """Topic-specific failover payload, or None when no substitution applies."""
    topic_config = _topic_config(config, topic)
    if topic_config is None:
        return None
    return topic_config.on_fail_response
