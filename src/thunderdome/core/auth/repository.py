"""Auth repository protocol for database operations."""

from datetime import datetime
from typing import Protocol, runtime_checkable
from uuid import UUID

from thunderdome.core.auth.types import APIKey, User


@runtime_checkable
class AuthRepository(Protocol):
    """Protocol for API key and user lookups.

    Implementations provide actual database access (PostgreSQL, etc).
    Store failures are raised as PersistenceError.
    """

    # User operations
    async def get_user_by_id(self, user_id: UUID) -> User | None:
        """Get user by ID."""
        ...

    async def get_user_by_email(self, email: str) -> User | None:
        """Get user by email address."""
        ...

    # API key operations
    async def create_api_key(self, key_id: str, name: str, user_id: UUID) -> datetime:
        """Store a new active API key and return its creation time."""
        ...

    async def count_user_api_keys(self, user_id: UUID) -> int:
        """Count the API keys owned by a user."""
        ...

    async def list_user_api_keys(self, user_id: UUID) -> list[APIKey]:
        """List a user's API keys ordered by creation time."""
        ...

    async def update_user_api_key(self, user_id: UUID, key_id: str, active: bool) -> None:
        """Set the active flag of a key owned by the user."""
        ...

    async def delete_user_api_key(self, user_id: UUID, key_id: str) -> None:
        """Delete a key owned by the user."""
        ...

    async def get_active_api_key_user(self, key_id: str) -> User | None:
        """Get the owner of an active API key."""
        ...
