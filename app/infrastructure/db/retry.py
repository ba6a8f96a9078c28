"""
Retry helper for transient database lock errors.

The settlement worker wraps each reconciliation pass with it: a locked
SQLite file or a MySQL deadlock is retried with exponential backoff, any
other error propagates immediately.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy.exc import DBAPIError, OperationalError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# MySQL deadlock / lock wait timeout, SQLite busy database
TRANSIENT_LOCK_MARKERS = ("1213", "1205", "database is locked")


def is_deadlock_error(error: Exception) -> bool:
    if isinstance(error, (OperationalError, DBAPIError)):
        error_str = str(error)
        return any(marker in error_str for marker in TRANSIENT_LOCK_MARKERS)
    return False


async def retry_on_deadlock(
    func: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay: float = 0.1,
) -> T:
    """
    Await ``func()``; on a transient lock error wait ``base_delay * 2**attempt``
    and try again, up to ``max_attempts`` calls in total.
    """
    for attempt in range(max_attempts):
        try:
            return await func()
        except Exception as e:
            if not is_deadlock_error(e) or attempt == max_attempts - 1:
                if is_deadlock_error(e):
                    logger.error(
                        "Database lock persists after max retries",
                        extra={"attempts": max_attempts, "error": str(e)},
                    )
                raise

            delay = base_delay * (2**attempt)
            logger.warning(
                "Database lock detected, retrying",
                extra={
                    "attempt": attempt + 1,
                    "max_attempts": max_attempts,
                    "retry_delay": delay,
                    "error": str(e),
                },
            )
            await asyncio.sleep(delay)

    raise RuntimeError("retry_on_deadlock called with max_attempts < 1")
