"""Tests for API key routes."""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import AsyncMock
from uuid import uuid4

from fastapi.testclient import TestClient

from thunderdome.core.auth.types import APIKey, User
from thunderdome.core.exceptions import EINVALID, PersistenceError, ThunderdomeError


def _api_key(user: User, key: str | None = None) -> APIKey:
    return APIKey(
        id="Ab3dE5g7.0123456789abcdef",
        prefix="Ab3dE5g7",
        name="CI key",
        user_id=user.id,
        created_at=datetime.now(UTC),
        key=key,
    )


class TestListApiKeys:
    """Tests for GET /users/{user_id}/apikeys."""

    def test_lists_keys(
        self, client: TestClient, mock_api_key_service: AsyncMock, sample_user: User
    ) -> None:
        """Lists the caller's keys without plaintext values."""
        mock_api_key_service.list_user_api_keys.return_value = [_api_key(sample_user)]

        response = client.get(f"/api/v1/users/{sample_user.id}/apikeys")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"][0]["prefix"] == "Ab3dE5g7"
        assert body["data"][0]["key"] is None
        mock_api_key_service.list_user_api_keys.assert_awaited_once_with(sample_user.id)

    def test_other_user_forbidden(
        self, client: TestClient, mock_api_key_service: AsyncMock
    ) -> None:
        """Rejects access to another user's keys."""
        response = client.get(f"/api/v1/users/{uuid4()}/apikeys")

        assert response.status_code == 403
        assert response.json()["error"] == "INVALID_USER"
        mock_api_key_service.list_user_api_keys.assert_not_called()

    def test_store_failure(
        self, client: TestClient, mock_api_key_service: AsyncMock, sample_user: User
    ) -> None:
        """Surfaces store failures as 500 with a generic message."""
        mock_api_key_service.list_user_api_keys.side_effect = PersistenceError(
            "unable to get api keys"
        )

        response = client.get(f"/api/v1/users/{sample_user.id}/apikeys")

        assert response.status_code == 500
        assert response.json()["error"] == "unable to get api keys"


class TestCreateApiKey:
    """Tests for POST /users/{user_id}/apikeys."""

    def test_returns_plaintext_key(
        self, client: TestClient, mock_api_key_service: AsyncMock, sample_user: User
    ) -> None:
        """Returns the created key including its plaintext value."""
        mock_api_key_service.generate_api_key.return_value = _api_key(
            sample_user, key="Ab3dE5g7.secret"
        )

        response = client.post(
            f"/api/v1/users/{sample_user.id}/apikeys", json={"name": "CI key"}
        )

        assert response.status_code == 200
        assert response.json()["data"]["key"] == "Ab3dE5g7.secret"
        mock_api_key_service.generate_api_key.assert_awaited_once_with(sample_user.id, "CI key")

    def test_missing_name(
        self, client: TestClient, mock_api_key_service: AsyncMock, sample_user: User
    ) -> None:
        """Rejects a body without a name."""
        response = client.post(f"/api/v1/users/{sample_user.id}/apikeys", json={"name": ""})

        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_REQUEST"
        mock_api_key_service.generate_api_key.assert_not_called()

    def test_limit_reached(
        self, client: TestClient, mock_api_key_service: AsyncMock, sample_user: User
    ) -> None:
        """Maps the key limit to 400."""
        mock_api_key_service.generate_api_key.side_effect = ThunderdomeError(
            EINVALID, "USER_APIKEY_LIMIT_REACHED"
        )

        response = client.post(
            f"/api/v1/users/{sample_user.id}/apikeys", json={"name": "CI key"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "USER_APIKEY_LIMIT_REACHED"

    def test_store_failure(
        self, client: TestClient, mock_api_key_service: AsyncMock, sample_user: User
    ) -> None:
        """Maps store failures to 500."""
        mock_api_key_service.generate_api_key.side_effect = PersistenceError(
            "unable to create new api key"
        )

        response = client.post(
            f"/api/v1/users/{sample_user.id}/apikeys", json={"name": "CI key"}
        )

        assert response.status_code == 500
        assert response.json()["error"] == "unable to create new api key"


class TestUpdateAndDeleteApiKey:
    """Tests for PUT and DELETE /users/{user_id}/apikeys/{key_id}."""

    def test_deactivate(
        self, client: TestClient, mock_api_key_service: AsyncMock, sample_user: User
    ) -> None:
        """Updates the active flag and returns the key list."""
        key = _api_key(sample_user)
        mock_api_key_service.update_user_api_key.return_value = [key]

        response = client.put(
            f"/api/v1/users/{sample_user.id}/apikeys/{key.id}", json={"active": False}
        )

        assert response.status_code == 200
        assert len(response.json()["data"]) == 1
        mock_api_key_service.update_user_api_key.assert_awaited_once_with(
            sample_user.id, key.id, False
        )

    def test_update_requires_active(
        self, client: TestClient, mock_api_key_service: AsyncMock, sample_user: User
    ) -> None:
        """Rejects a body without the active flag."""
        response = client.put(f"/api/v1/users/{sample_user.id}/apikeys/abc.def", json={})

        assert response.status_code == 400
        mock_api_key_service.update_user_api_key.assert_not_called()

    def test_delete(
        self, client: TestClient, mock_api_key_service: AsyncMock, sample_user: User
    ) -> None:
        """Deletes the key and returns the remaining keys."""
        mock_api_key_service.delete_user_api_key.return_value = []

        response = client.delete(f"/api/v1/users/{sample_user.id}/apikeys/abc.def")

        assert response.status_code == 200
        assert response.json()["data"] == []
        mock_api_key_service.delete_user_api_key.assert_awaited_once_with(
            sample_user.id, "abc.def"
        )
