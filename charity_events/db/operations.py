"""Retrying transaction helper used by the API routes."""

import logging
import time
from functools import wraps
from typing import Any, Callable, Tuple, Type, TypeVar

from sqlalchemy.exc import IntegrityError, OperationalError

from .db_core import db, DatabaseError

logger = logging.getLogger(__name__)

T = TypeVar('T')

def _is_transient(error: BaseException, exceptions: Tuple[Type[BaseException], ...]) -> bool:
    # db.session() wraps driver errors, so look one level down the chain too
    return isinstance(error, exceptions) or isinstance(error.__cause__, exceptions)

def with_retry(
    max_attempts: int = 3,
    delay: float = 0.1,
    backoff: float = 2,
    exceptions: Tuple[Type[BaseException], ...] = (OperationalError,)
) -> Callable:
    """
    Retry a database call on transient errors with exponential backoff.

    Args:
        max_attempts: Total number of calls, including the first
        delay: Seconds to wait before the second call
        backoff: Multiplier applied to the wait after each failure
        exceptions: Error types treated as transient

    Example:
        @with_retry(max_attempts=3)
        def count_events() -> int:
            with db.session() as session:
                return session.query(Event).count()
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            wait = delay
            for attempt in range(1, max_attempts + 1):
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    if not _is_transient(e, exceptions) or attempt == max_attempts:
                        if attempt > 1:
                            logger.error(f"{func.__name__} failed after {attempt} attempts: {e}")
                        raise
                    logger.warning(
                        f"Attempt {attempt}/{max_attempts} of {func.__name__} failed: {e}. "
                        f"Retrying in {wait}s..."
                    )
                    time.sleep(wait)
                    wait *= backoff
            raise DatabaseError(f"{func.__name__} was never attempted")

        return wrapper
    return decorator

@with_retry()
def execute_in_transaction(operation: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """
    Run operation(session, *args, **kwargs) inside one transaction.

    Example:
        events = execute_in_transaction(queries.list_active_events)
    """
    with db.session() as session:
        try:
            return operation(session, *args, **kwargs)
        except IntegrityError as e:
            raise DatabaseError(f"Integrity error in transaction: {e}") from e
