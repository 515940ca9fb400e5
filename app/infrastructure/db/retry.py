"""
Database retry utilities for handling transient failures.

Retries a unit of work when the database aborts it because of a deadlock,
a lock wait timeout or a serialization failure. Callers never see these
errors unless they persist after the last attempt.
"""

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.exc import DBAPIError, OperationalError

logger = logging.getLogger(__name__)

T = TypeVar('T')

# MySQL error codes
MYSQL_DEADLOCK_ERROR = "1213"
MYSQL_LOCK_WAIT_TIMEOUT = "1205"

# PostgreSQL SQLSTATE codes
PG_SERIALIZATION_FAILURE = "40001"
PG_DEADLOCK_DETECTED = "40P01"

TRANSIENT_MESSAGES = (
    "deadlock",
    "could not serialize access",
    "database is locked",
)


def _sqlstate(error: DBAPIError) -> str | None:
    orig = getattr(error, "orig", None)
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def is_serialization_failure(error: Exception) -> bool:
    """
    Check if an exception is a transient concurrency failure.

    Args:
        error: The exception to check

    Returns:
        True if the whole transaction can safely be retried
    """
    if not isinstance(error, (OperationalError, DBAPIError)):
        return False
    if _sqlstate(error) in (PG_SERIALIZATION_FAILURE, PG_DEADLOCK_DETECTED):
        return True
    error_str = str(error)
    if MYSQL_DEADLOCK_ERROR in error_str or MYSQL_LOCK_WAIT_TIMEOUT in error_str:
        return True
    if PG_SERIALIZATION_FAILURE in error_str or PG_DEADLOCK_DETECTED in error_str:
        return True
    lowered = error_str.lower()
    return any(message in lowered for message in TRANSIENT_MESSAGES)


async def retry_on_serialization_failure(
    func: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay: float = 0.1,
) -> T:
    """
    Retry a unit of work if it fails with a transient concurrency error.

    Uses exponential backoff: base_delay * (2 ** attempt)

    Args:
        func: The async function to execute (it must open its own transaction)
        max_attempts: Maximum number of attempts (default: 3)
        base_delay: Base delay in seconds for exponential backoff (default: 0.1)

    Returns:
        The result of the function call

    Raises:
        The original exception if max attempts exceeded or the error is not transient
    """
    for attempt in range(max_attempts):
        try:
            return await func()
        except Exception as e:
            if not is_serialization_failure(e):
                raise

            if attempt == max_attempts - 1:
                logger.error(
                    "Serialization failure persists after max retries",
                    extra={
                        "attempts": max_attempts,
                        "error": str(e),
                    }
                )
                raise

            delay = base_delay * (2 ** attempt)
            logger.warning(
                "Serialization failure detected, retrying",
                extra={
                    "attempt": attempt + 1,
                    "max_attempts": max_attempts,
                    "retry_delay": delay,
                    "error": str(e),
                }
            )
            await asyncio.sleep(delay)

    raise RuntimeError("retry_on_serialization_failure requires max_attempts >= 1")
