"""PostgreSQL implementation of AuthRepository."""

from datetime import datetime
from typing import Any
from uuid import UUID

from thunderdome.adapters.db.app_db import AppDatabase
from thunderdome.adapters.db.errors import persistence_errors
from thunderdome.core.auth.keys import prefix_from_id
from thunderdome.core.auth.types import APIKey, User
from thunderdome.core.exceptions import PersistenceError

USER_COLUMNS = """
    u.id, u.name, u.email, u.type, u.avatar, u.verified, u.notifications_enabled,
    COALESCE(u.country, '') AS country, COALESCE(u.locale, '') AS locale,
    COALESCE(u.company, '') AS company, COALESCE(u.job_title, '') AS job_title,
    u.created_at, u.updated_at, u.last_active
"""


class PostgresAuthRepository:
    """PostgreSQL implementation of auth repository."""

    def __init__(self, db: AppDatabase) -> None:
        """Initialize with database connection.

        Args:
            db: Application database instance.
        """
        self._db = db

    def _row_to_user(self, row: dict[str, Any]) -> User:
        """Convert database row to User model."""
        return User(
            id=row["id"],
            name=row["name"],
            email=row.get("email"),
            type=row.get("type", "REGISTERED"),
            avatar=row.get("avatar", "robohash"),
            verified=row.get("verified", False),
            notifications_enabled=row.get("notifications_enabled", True),
            country=row.get("country") or "",
            locale=row.get("locale") or "",
            company=row.get("company") or "",
            job_title=row.get("job_title") or "",
            created_at=row["created_at"],
            updated_at=row.get("updated_at"),
            last_active=row.get("last_active"),
        )

    def _row_to_api_key(self, row: dict[str, Any]) -> APIKey:
        """Convert database row to APIKey model."""
        return APIKey(
            id=row["id"],
            prefix=prefix_from_id(row["id"]),
            name=row["name"],
            user_id=row["user_id"],
            active=row["active"],
            created_at=row["created_at"],
            updated_at=row.get("updated_at"),
        )

    # User operations
    async def get_user_by_id(self, user_id: UUID) -> User | None:
        """Get user by ID."""
        with persistence_errors("unable to get user", user_id=str(user_id)):
            row = await self._db.fetch_one(
                f"SELECT {USER_COLUMNS} FROM users u WHERE u.id = $1",
                user_id,
            )
        return self._row_to_user(row) if row else None

    async def get_user_by_email(self, email: str) -> User | None:
        """Get user by email address (case-insensitive)."""
        with persistence_errors("unable to get user"):
            row = await self._db.fetch_one(
                f"SELECT {USER_COLUMNS} FROM users u WHERE LOWER(u.email) = LOWER($1)",
                email,
            )
        return self._row_to_user(row) if row else None

    # API key operations
    async def create_api_key(self, key_id: str, name: str, user_id: UUID) -> datetime:
        """Store a new active API key and return its creation time."""
        with persistence_errors("unable to create new api key", user_id=str(user_id)):
            row = await self._db.execute_returning(
                """
                INSERT INTO api_keys (id, name, user_id, active)
                VALUES ($1, $2, $3, true)
                RETURNING created_at
                """,
                key_id,
                name,
                user_id,
            )
        if row is None:
            raise PersistenceError("unable to create new api key")
        created_at: datetime = row["created_at"]
        return created_at

    async def count_user_api_keys(self, user_id: UUID) -> int:
        """Count the API keys owned by a user."""
        with persistence_errors("unable to get api keys", user_id=str(user_id)):
            count = await self._db.fetch_value(
                "SELECT COUNT(*) FROM api_keys WHERE user_id = $1",
                user_id,
            )
        return int(count or 0)

    async def list_user_api_keys(self, user_id: UUID) -> list[APIKey]:
        """List a user's API keys ordered by creation time."""
        with persistence_errors("unable to get api keys", user_id=str(user_id)):
            rows = await self._db.fetch_all(
                """
                SELECT id, name, user_id, active, created_at, updated_at
                FROM api_keys
                WHERE user_id = $1
                ORDER BY created_at
                """,
                user_id,
            )
        return [self._row_to_api_key(row) for row in rows]

    async def update_user_api_key(self, user_id: UUID, key_id: str, active: bool) -> None:
        """Set the active flag of a key owned by the user."""
        with persistence_errors("unable to update api key", user_id=str(user_id)):
            await self._db.execute(
                """
                UPDATE api_keys SET active = $3, updated_at = NOW()
                WHERE id = $1 AND user_id = $2
                """,
                key_id,
                user_id,
                active,
            )

    async def delete_user_api_key(self, user_id: UUID, key_id: str) -> None:
        """Delete a key owned by the user."""
        with persistence_errors("unable to delete api key", user_id=str(user_id)):
            await self._db.execute(
                "DELETE FROM api_keys WHERE id = $1 AND user_id = $2",
                key_id,
                user_id,
            )

    async def get_active_api_key_user(self, key_id: str) -> User | None:
        """Get the owner of an active API key."""
        with persistence_errors("active API Key match not found"):
            row = await self._db.fetch_one(
                f"""
                SELECT {USER_COLUMNS}
                FROM api_keys ak
                JOIN users u ON u.id = ak.user_id
                WHERE ak.id = $1 AND ak.active = true
                """,
                key_id,
            )
        return self._row_to_user(row) if row else None
