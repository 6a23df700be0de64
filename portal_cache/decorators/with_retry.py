"""Retry policy for opening store connections, built on Tenacity."""

from collections.abc import Awaitable, Callable
from logging import getLogger
from typing import ParamSpec, TypeVar

from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    stop_after_delay,
    wait_exponential_jitter,
)

from portal_cache.configs import file_logger

logger = file_logger(getLogger(__name__))

P = ParamSpec("P")
T = TypeVar("T")
CONNECT_ERRORS = (RedisConnectionError, RedisTimeoutError, ConnectionError, TimeoutError)


def _log_attempt(retry_state: RetryCallState) -> None:
    """Log a failed attempt with the address of the store being dialled."""
    owner = retry_state.args[0] if retry_state.args else None
    address = getattr(owner, "address", "store")
    error = retry_state.outcome.exception() if retry_state.outcome else None
    delay = retry_state.next_action.sleep if retry_state.next_action else 0
    logger.warning(
        "Connection to %s failed on attempt %d (%s), retrying in %.2fs",
        address,
        retry_state.attempt_number,
        error,
        delay,
    )


def with_retry(
    attempts: int = 3,
    base_delay: float = 0.1,
    max_delay: float = 2.0,
    deadline: float | None = None,
    retry_on: tuple[type[Exception], ...] = CONNECT_ERRORS,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """
    Retry an async connection routine with jittered exponential backoff.

    Args:
        attempts: Maximum number of attempts, the first one included.
        base_delay: Delay before the first retry in seconds.
        max_delay: Upper bound of a single delay in seconds.
        deadline: Optional bound on the total time spent retrying.
        retry_on: Exception types that trigger another attempt.

    Returns:
        Decorator re-raising the last error once the attempts are spent.

    Example:
        @with_retry(attempts=3, base_delay=0.2, deadline=10)
        async def connect(self) -> None: ...
    """
    stop = stop_after_attempt(attempts)
    if deadline is not None:
        stop = stop | stop_after_delay(deadline)
    return retry(
        stop=stop,
        wait=wait_exponential_jitter(initial=base_delay, max=max_delay),
        retry=retry_if_exception_type(retry_on),
        before_sleep=_log_attempt,
        reraise=True,
    )
