"""Bounded retry for transient database errors, and the persistence error boundary.

Repository methods decorated with persistence_operation() retry transient
connectivity failures with exponential backoff, roll the session back
between attempts, and surface every SQLAlchemy error as PersistenceException.
"""

import logging
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, ParamSpec, TypeVar

from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError, SQLAlchemyError
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from crudkit.domain.exceptions import PersistenceException

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def is_transient_error(exc: BaseException) -> bool:
    """Return True for connectivity errors worth retrying (not constraint or programming errors)."""
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return True
    return isinstance(exc, (OperationalError, InterfaceError))


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "Transient database error (attempt %d): %s; retrying",
        retry_state.attempt_number,
        exc,
    )


def persistence_operation(
    operation: str,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorate an async repository method with retry and error wrapping.

    The decorated method's owner must expose ``db`` (AsyncSession),
    ``retry_attempts`` and ``retry_max_wait``.

    Args:
        operation: Name used in logs and in PersistenceException details.
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            repo: Any = args[0]
            try:
                async for attempt in AsyncRetrying(
                    retry=retry_if_exception(is_transient_error),
                    stop=stop_after_attempt(max(1, repo.retry_attempts)),
                    wait=wait_exponential(multiplier=0.1, max=repo.retry_max_wait),
                    before_sleep=_log_retry,
                    reraise=True,
                ):
                    with attempt:
                        try:
                            return await func(*args, **kwargs)
                        except SQLAlchemyError:
                            await repo.db.rollback()
                            raise
            except SQLAlchemyError as exc:
                raise PersistenceException(operation, str(exc)) from exc
            raise AssertionError("unreachable")  # pragma: no cover

        return wrapper

    return decorator
