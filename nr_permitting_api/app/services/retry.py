"""
Retry policy for transient storage failures.

``execute_with_retry`` wraps any zero-argument coroutine factory and
re-runs it when the failure looks like a network or timeout problem.
It has no knowledge of what the operation does, so every storage call
in the service layer goes through the same wrapper.
"""

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Matched case-insensitively against the exception message.
TRANSIENT_ERROR_MARKERS = (
    "ECONNRESET",
    "ECONNREFUSED",
    "ETIMEDOUT",
    "ENOTFOUND",
    "connection reset",
    "connection refused",
    "connection terminated",
    "server closed the connection",
    "host not found",
    "timeout",
    "timed out",
    "database is locked",
)


def is_transient_error(error: BaseException) -> bool:
    """Return ``True`` if ``error`` looks recoverable by retrying."""
    message = str(error).lower()
    return any(marker.lower() in message for marker in TRANSIENT_ERROR_MARKERS)


async def execute_with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay: float = 1.0,
) -> T:
    """Run ``operation`` and retry it on transient failures.

    Parameters
    ----------
    operation : Callable[[], Awaitable[T]]
        Zero-argument callable returning a fresh awaitable on each call.
    max_attempts : int
        Total number of attempts, including the first one.
    base_delay : float
        Delay in seconds before the second attempt; it doubles before
        each following attempt (``base_delay * 2 ** (attempt - 1)``).

    Returns
    -------
    T
        Whatever the first successful attempt returned.

    Non-transient errors are re-raised immediately.  When the last
    attempt fails its error is re-raised unchanged.  The backoff uses
    ``asyncio.sleep`` and is interrupted if the task is cancelled.
    """
    attempt = 1
    while True:
        try:
            return await operation()
        except Exception as exc:
            if not is_transient_error(exc) or attempt >= max_attempts:
                raise
            delay = base_delay * 2 ** (attempt - 1)
            logger.warning(
                "Database operation failed (attempt %s/%s), retrying in %.1fs: %s",
                attempt,
                max_attempts,
                delay,
                exc,
            )
            await asyncio.sleep(delay)
            attempt += 1
