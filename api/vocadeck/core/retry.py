"""
Bounded retry for writes that lost a race.
"""
import logging
from typing import Callable, Optional, TypeVar

from vocadeck.core.config import settings
from vocadeck.core.exceptions import ConflictError, SessionStateError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_on_conflict(
    operation: Callable[[], T],
    attempts: Optional[int] = None,
    description: str = "write"
) -> T:
    """
    Run operation, re-running it when it raises ConflictError.

    The operation must reload whatever it mutates on every call. After the
    last attempt the ConflictError propagates. SessionStateError is never
    retried because the session will refuse the same request again.
    """
    attempts = attempts or settings.conflict_retry_attempts
    for attempt in range(1, attempts + 1):
        try:
            return operation()
        except SessionStateError:
            raise
        except ConflictError as e:
            if attempt >= attempts:
                logger.error(f"Giving up on {description} after {attempts} attempt(s): {e}")
                raise
            logger.warning(f"Conflict on {description} (attempt {attempt}/{attempts}): {e}")
    raise ConflictError(f"{description} was not attempted")
