"""Tests for the response envelope and exception handlers."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel

from thunderdome.core.exceptions import (
    EINTERNAL,
    EINVALID,
    ENOTFOUND,
    NotFoundError,
    PersistenceError,
    ThunderdomeError,
)
from thunderdome.entrypoints.api.responses import (
    INTERNAL_ERROR_MESSAGE,
    ApiFailure,
    Envelope,
    error_message,
    failure_on_error,
    register_exception_handlers,
    status_for_error,
)


class Item(BaseModel):
    """Request body used by the test app."""

    name: str


@pytest.fixture
def client() -> TestClient:
    """Create a test client for an app exercising every handler."""
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/ok")
    async def ok() -> Envelope[dict[str, int]]:
        return Envelope(data={"answer": 42})

    @app.get("/not-found")
    async def not_found() -> None:
        with failure_on_error():
            raise NotFoundError("TEAM_NOT_FOUND")

    @app.get("/uncaught")
    async def uncaught() -> None:
        raise ThunderdomeError(EINVALID, "BAD_THING")

    @app.get("/crash")
    async def crash() -> None:
        raise ApiFailure(500, RuntimeError("secret detail"))

    @app.post("/items")
    async def create_item(item: Item) -> Envelope[Item]:
        return Envelope(data=item)

    return TestClient(app)


class TestEnvelope:
    """Tests for the envelope shape."""

    def test_success(self, client: TestClient) -> None:
        """Test the success envelope."""
        response = client.get("/ok")

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "error": "",
            "data": {"answer": 42},
            "meta": {},
        }

    def test_failure_on_error_defaults_to_500(self, client: TestClient) -> None:
        """Test that store errors are 500 with their message."""
        response = client.get("/not-found")

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "TEAM_NOT_FOUND",
            "data": {},
            "meta": {},
        }

    def test_uncaught_error_uses_code(self, client: TestClient) -> None:
        """Test that uncaught ThunderdomeErrors map by code."""
        response = client.get("/uncaught")

        assert response.status_code == 400
        assert response.json()["error"] == "BAD_THING"

    def test_non_domain_errors_are_generic(self, client: TestClient) -> None:
        """Test that unexpected error details are not leaked."""
        response = client.get("/crash")

        assert response.status_code == 500
        assert response.json()["error"] == INTERNAL_ERROR_MESSAGE

    def test_validation_error_is_400(self, client: TestClient) -> None:
        """Test that request validation failures become 400."""
        response = client.post("/items", json={})

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["error"] == "INVALID_REQUEST"

    def test_unknown_route_is_enveloped(self, client: TestClient) -> None:
        """Test that framework HTTP errors use the envelope."""
        response = client.get("/missing")

        assert response.status_code == 404
        assert response.json()["success"] is False


class TestHelpers:
    """Tests for error helpers."""

    def test_error_message(self) -> None:
        """Test client-safe messages."""
        assert error_message(NotFoundError("TEAM_NOT_FOUND")) == "TEAM_NOT_FOUND"
        assert error_message("USER_NOT_FOUND") == "USER_NOT_FOUND"
        assert error_message(KeyError("x")) == INTERNAL_ERROR_MESSAGE

    def test_status_for_error(self) -> None:
        """Test that invalid input is 400 and everything else the default."""
        assert status_for_error(ThunderdomeError(EINVALID, "x")) == 400
        assert status_for_error(PersistenceError("x")) == 500
        assert status_for_error(ThunderdomeError(ENOTFOUND, "x"), default=404) == 404

    def test_failure_on_error_keeps_cause(self) -> None:
        """Test that the original error is kept on the failure."""
        error = ThunderdomeError(EINTERNAL, "unable to get team")

        with pytest.raises(ApiFailure) as exc_info:
            with failure_on_error():
                raise error

        assert exc_info.value.error is error
        assert exc_info.value.__cause__ is error
