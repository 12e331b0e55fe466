"""Unit tests for ApiKeyService."""

from __future__ import annotations

import uuid
from unittest.mock import AsyncMock

import pytest

from thunderdome.core.auth.types import User
from thunderdome.core.exceptions import EINVALID, EUNAUTHORIZED, PersistenceError, ThunderdomeError
from thunderdome.services.apikeys import DEFAULT_USER_APIKEY_LIMIT, ApiKeyService
from tests.fixtures.mocks import InMemoryAuthRepository


@pytest.fixture
def service(memory_auth_repo: InMemoryAuthRepository) -> ApiKeyService:
    """Return a service backed by the in-memory repository."""
    return ApiKeyService(memory_auth_repo)


class TestGenerateApiKey:
    """Tests for generate_api_key."""

    async def test_returns_plaintext_key_once(
        self, service: ApiKeyService, sample_user: User
    ) -> None:
        """Test that generation returns the key and lists never do."""
        created = await service.generate_api_key(sample_user.id, "CI key")

        assert created.key is not None
        assert created.key.startswith(created.prefix + ".")
        assert created.id.startswith(created.prefix + ".")
        assert created.active is True

        keys = await service.list_user_api_keys(sample_user.id)
        assert [k.id for k in keys] == [created.id]
        assert keys[0].key is None

    async def test_generated_keys_are_distinct(
        self, service: ApiKeyService, sample_user: User
    ) -> None:
        """Test that two keys for the same user differ."""
        first = await service.generate_api_key(sample_user.id, "one")
        second = await service.generate_api_key(sample_user.id, "two")

        assert first.key != second.key
        assert first.id != second.id

    async def test_limit_reached(
        self, memory_auth_repo: InMemoryAuthRepository, sample_user: User
    ) -> None:
        """Test that generation fails once the per-user limit is reached."""
        service = ApiKeyService(memory_auth_repo, key_limit=2)
        await service.generate_api_key(sample_user.id, "one")
        await service.generate_api_key(sample_user.id, "two")

        with pytest.raises(ThunderdomeError) as exc_info:
            await service.generate_api_key(sample_user.id, "three")

        assert exc_info.value.code == EINVALID
        assert exc_info.value.message == "USER_APIKEY_LIMIT_REACHED"
        assert len(memory_auth_repo.keys) == 2

    def test_default_limit(self) -> None:
        """Test the default per-user key limit."""
        assert DEFAULT_USER_APIKEY_LIMIT == 5

    async def test_store_failure_propagates(self, sample_user: User) -> None:
        """Test that store errors are raised unchanged."""
        repo = AsyncMock()
        repo.count_user_api_keys.return_value = 0
        repo.create_api_key.side_effect = PersistenceError("unable to create new api key")
        service = ApiKeyService(repo)

        with pytest.raises(PersistenceError):
            await service.generate_api_key(sample_user.id, "CI key")


class TestVerifyApiKey:
    """Tests for get_api_key_user."""

    async def test_generated_key_verifies(
        self, service: ApiKeyService, sample_user: User
    ) -> None:
        """Test that a freshly generated key resolves to its owner."""
        created = await service.generate_api_key(sample_user.id, "CI key")
        assert created.key is not None

        user = await service.get_api_key_user(created.key)

        assert user.id == sample_user.id

    async def test_deactivated_key_fails_but_stays_listed(
        self, service: ApiKeyService, sample_user: User
    ) -> None:
        """Test that an inactive key no longer verifies."""
        created = await service.generate_api_key(sample_user.id, "CI key")
        assert created.key is not None

        keys = await service.update_user_api_key(sample_user.id, created.id, False)

        assert [(k.id, k.active) for k in keys] == [(created.id, False)]
        with pytest.raises(ThunderdomeError) as exc_info:
            await service.get_api_key_user(created.key)
        assert exc_info.value.code == EUNAUTHORIZED
        assert exc_info.value.message == "active API Key match not found"

    async def test_reactivated_key_verifies(
        self, service: ApiKeyService, sample_user: User
    ) -> None:
        """Test that reactivating a key restores verification."""
        created = await service.generate_api_key(sample_user.id, "CI key")
        assert created.key is not None
        await service.update_user_api_key(sample_user.id, created.id, False)
        await service.update_user_api_key(sample_user.id, created.id, True)

        user = await service.get_api_key_user(created.key)

        assert user.id == sample_user.id

    @pytest.mark.parametrize("key", ["", "no-separator", ".secret", "prefix."])
    async def test_malformed_key(self, service: ApiKeyService, key: str) -> None:
        """Test that malformed keys are rejected."""
        with pytest.raises(ThunderdomeError) as exc_info:
            await service.get_api_key_user(key)
        assert exc_info.value.message == "active API Key match not found"

    async def test_tampered_secret(self, service: ApiKeyService, sample_user: User) -> None:
        """Test that a key with a changed secret does not verify."""
        created = await service.generate_api_key(sample_user.id, "CI key")
        assert created.key is not None

        with pytest.raises(ThunderdomeError):
            await service.get_api_key_user(created.key + "x")


class TestUpdateAndDelete:
    """Tests for update_user_api_key and delete_user_api_key."""

    async def test_delete_leaves_other_keys(
        self, service: ApiKeyService, sample_user: User
    ) -> None:
        """Test that deleting one key keeps the others."""
        first = await service.generate_api_key(sample_user.id, "one")
        second = await service.generate_api_key(sample_user.id, "two")

        keys = await service.delete_user_api_key(sample_user.id, first.id)

        assert [k.id for k in keys] == [second.id]

    async def test_other_users_keys_untouched(
        self, memory_auth_repo: InMemoryAuthRepository, service: ApiKeyService, sample_user: User
    ) -> None:
        """Test that a user cannot delete another user's key."""
        created = await service.generate_api_key(sample_user.id, "CI key")

        keys = await service.delete_user_api_key(uuid.uuid4(), created.id)

        assert keys == []
        assert created.id in memory_auth_repo.keys
