"""
Retry strategy for repository writes.

Failed attempts wait ``initial * 2**n`` milliseconds plus a random jitter
before trying again.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from elasticsearch import TransportError
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from es_query_builder.config import RetrySettings
from es_query_builder.core.exceptions import OperationFailedError

logger = logging.getLogger(__name__)

RETRYABLE_ERRORS = (OperationFailedError, TransportError)

F = TypeVar("F", bound=Callable[..., Any])


def build_retrying(settings: RetrySettings) -> Retrying:
    """
    Build a tenacity retrying controller from settings.

    Args:
        settings: Backoff settings

    Returns:
        Retrying that re-raises the last error once retries are exhausted
    """
    return Retrying(
        stop=stop_after_attempt(settings.max_retries + 1),
        wait=wait_exponential(multiplier=settings.initial_ms / 1000, exp_base=2)
        + wait_random(0, settings.jitter_ms / 1000),
        retry=retry_if_exception_type(RETRYABLE_ERRORS),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )


def retryable(method: F) -> F:
    """Retry a ``Repo`` method according to the repo's retry settings."""

    @functools.wraps(method)
    def wrapper(self, *args: Any, **kwargs: Any) -> Any:
        return build_retrying(self.settings.retry)(method, self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]
