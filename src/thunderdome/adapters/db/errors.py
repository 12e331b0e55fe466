"""Translation of driver errors into domain errors."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import asyncpg
import structlog

from thunderdome.core.exceptions import PersistenceError

logger = structlog.get_logger()

# Errors raised by asyncpg for failed statements and lost connections
DATABASE_ERRORS: tuple[type[Exception], ...] = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    OSError,
)


@contextmanager
def persistence_errors(message: str, **context: Any) -> Iterator[None]:
    """Log driver errors and re-raise them as PersistenceError.

    Usage:
        with persistence_errors("unable to create new api key", user_id=str(user_id)):
            await self._db.execute(...)

    Args:
        message: Client-safe message for the raised PersistenceError.
        **context: Extra structured log fields.
    """
    try:
        yield
    except DATABASE_ERRORS as e:
        logger.error("database_error", message=message, error=str(e), **context)
        raise PersistenceError(message) from e
