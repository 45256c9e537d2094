"""Bounded timeout and retry for store-backed engine operations.

Transient store failures (timeouts, dropped connections, a lost race on a
unique key) are translated to :class:`ConflictRetryable` and the whole
operation is re-run with exponential backoff. Everything else propagates on
the first attempt.
"""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from tenacity import AsyncRetrying, RetryCallState, retry_if_exception_type, stop_after_attempt, wait_exponential

from canonkeeper.config import get_settings
from canonkeeper.errors import ConflictRetryable
from canonkeeper.utils.logging_config import get_logger

logger = get_logger("canonkeeper.retry")

T = TypeVar("T")


async def run_with_timeout(operation: str, attempt: Callable[[], Awaitable[T]], timeout: float) -> T:
    """Run one attempt, translating timeouts and transient store errors."""
    try:
        return await asyncio.wait_for(attempt(), timeout=timeout)
    except asyncio.TimeoutError as e:
        raise ConflictRetryable(f"{operation} timed out after {timeout:g}s") from e
    except PoolTimeoutError as e:
        raise ConflictRetryable(f"{operation} could not get a database connection") from e
    except IntegrityError as e:
        # Pre-checks passed but a concurrent writer got there first; a retry re-reads and decides again
        raise ConflictRetryable(f"{operation} lost a race with a concurrent write") from e
    except OperationalError as e:
        raise ConflictRetryable(f"{operation} hit a transient store error: {e.orig}") from e
    except DBAPIError as e:
        if e.connection_invalidated:
            raise ConflictRetryable(f"{operation} lost its database connection") from e
        raise


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "Retrying %s after transient failure: %s",
        retry_state.kwargs.get("operation", "operation"),
        exc,
        extra={"event_type": "store_retry", "attempt": retry_state.attempt_number},
    )


async def run_retryable(operation: str, attempt: Callable[[], Awaitable[T]]) -> T:
    """Run ``attempt`` under the configured timeout, retrying ConflictRetryable.

    ``attempt`` must be safe to re-run from scratch: each call opens its own
    transaction, so a failed attempt leaves nothing behind.
    """
    settings = get_settings()
    retrying = AsyncRetrying(
        retry=retry_if_exception_type(ConflictRetryable),
        stop=stop_after_attempt(settings.store_max_attempts),
        wait=wait_exponential(multiplier=settings.store_retry_base_delay, max=settings.store_retry_max_delay),
        before_sleep=_log_retry,
        reraise=True,
    )
    return await retrying(run_with_timeout, operation=operation, attempt=attempt, timeout=settings.store_timeout_seconds)
