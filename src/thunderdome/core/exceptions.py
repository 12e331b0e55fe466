"""Domain-specific exceptions.

All exceptions raised by the thunderdome core inherit from ThunderdomeError.
Each carries an application error code, which says what kind of failure
happened, and a message that is safe to show to API clients. The HTTP
status is chosen by the caller, not by the code.
"""

from __future__ import annotations

EINVALID = "invalid"
EUNAUTHORIZED = "unauthorized"
ENOTFOUND = "not_found"
ECONFLICT = "conflict"
EINTERNAL = "internal"

ERROR_CODES = frozenset({EINVALID, EUNAUTHORIZED, ENOTFOUND, ECONFLICT, EINTERNAL})


class ThunderdomeError(Exception):
    """Base exception for all thunderdome errors.

    Attributes:
        code: Application error code (one of ERROR_CODES).
        message: Client-safe error message.
    """

    def __init__(self, code: str, message: str) -> None:
        """Initialize ThunderdomeError.

        Args:
            code: Application error code.
            message: Client-safe error message.
        """
        if code not in ERROR_CODES:
            raise ValueError(f"Unknown error code: {code}")
        super().__init__(message)
        self.code = code
        self.message = message

    def __repr__(self) -> str:
        """Return a debug representation."""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class NotFoundError(ThunderdomeError):
    """A requested record does not exist."""

    def __init__(self, message: str) -> None:
        """Initialize NotFoundError."""
        super().__init__(ENOTFOUND, message)


class PersistenceError(ThunderdomeError):
    """The relational store rejected or failed an operation.

    The underlying driver error is logged where this is raised and kept as
    ``__cause__``; only the generic message reaches clients.
    """

    def __init__(self, message: str) -> None:
        """Initialize PersistenceError."""
        super().__init__(EINTERNAL, message)

