"""API key issuance and verification service."""

from uuid import UUID

import structlog

from thunderdome.core.auth.keys import generate_key, hash_key, key_id_for, prefix_from_id
from thunderdome.core.auth.repository import AuthRepository
from thunderdome.core.auth.types import APIKey, User
from thunderdome.core.exceptions import EINVALID, EUNAUTHORIZED, ThunderdomeError

logger = structlog.get_logger()

DEFAULT_USER_APIKEY_LIMIT = 5


class ApiKeyService:
    """Service for API key lifecycle operations."""

    def __init__(self, repo: AuthRepository, key_limit: int = DEFAULT_USER_APIKEY_LIMIT):
        """Initialize with auth repository.

        Args:
            repo: Auth repository for database operations.
            key_limit: Maximum number of keys a user may own.
        """
        self._repo = repo
        self._key_limit = key_limit

    async def generate_api_key(self, user_id: UUID, name: str) -> APIKey:
        """Create a new API key for a user.

        Returns the full key only once - it cannot be retrieved later.

        Raises:
            ThunderdomeError: If the user already owns ``key_limit`` keys.
            PersistenceError: If the key cannot be stored.
        """
        existing = await self._repo.count_user_api_keys(user_id)
        if existing >= self._key_limit:
            raise ThunderdomeError(EINVALID, "USER_APIKEY_LIMIT_REACHED")

        prefix, key = generate_key()
        key_id = f"{prefix}.{hash_key(key)}"

        created_at = await self._repo.create_api_key(key_id, name, user_id)

        logger.info("api_key_created", key_prefix=prefix, user_id=str(user_id), name=name)

        return APIKey(
            id=key_id,
            prefix=prefix,
            name=name,
            user_id=user_id,
            active=True,
            created_at=created_at,
            key=key,
        )

    async def list_user_api_keys(self, user_id: UUID) -> list[APIKey]:
        """List a user's API keys (without revealing key values)."""
        return await self._repo.list_user_api_keys(user_id)

    async def update_user_api_key(self, user_id: UUID, key_id: str, active: bool) -> list[APIKey]:
        """Activate or deactivate a key, returning the user's keys."""
        await self._repo.update_user_api_key(user_id, key_id, active)
        logger.info(
            "api_key_updated",
            key_prefix=prefix_from_id(key_id),
            user_id=str(user_id),
            active=active,
        )
        return await self._repo.list_user_api_keys(user_id)

    async def delete_user_api_key(self, user_id: UUID, key_id: str) -> list[APIKey]:
        """Delete a key, returning the user's remaining keys."""
        await self._repo.delete_user_api_key(user_id, key_id)
        logger.info("api_key_deleted", key_prefix=prefix_from_id(key_id), user_id=str(user_id))
        return await self._repo.list_user_api_keys(user_id)

    async def get_api_key_user(self, key: str) -> User:
        """Resolve a presented API key to its owner.

        Raises:
            ThunderdomeError: If the key is malformed, unknown or inactive.
        """
        key_id = key_id_for(key)
        if key_id is None:
            logger.warning("malformed_api_key")
            raise ThunderdomeError(EUNAUTHORIZED, "active API Key match not found")

        user = await self._repo.get_active_api_key_user(key_id)
        if user is None:
            logger.warning("invalid_api_key", key_prefix=prefix_from_id(key_id))
            raise ThunderdomeError(EUNAUTHORIZED, "active API Key match not found")

        return user
