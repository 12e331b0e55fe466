"""Shared fixtures for route tests."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from thunderdome.core.auth.types import User
from thunderdome.entrypoints.api.deps import (
    Settings,
    get_api_key_service,
    get_auth_repo,
    get_org_repo,
    get_settings,
)
from thunderdome.entrypoints.api.middleware.auth import verify_api_key
from thunderdome.entrypoints.api.responses import register_exception_handlers
from thunderdome.entrypoints.api.routes import api_router


@pytest.fixture
def app_settings() -> Settings:
    """Return settings with organizations enabled."""
    settings = Settings()
    settings.organizations_enabled = True
    return settings


@pytest.fixture
def mock_api_key_service() -> AsyncMock:
    """Return a mock API key service."""
    return AsyncMock()


@pytest.fixture
def app(
    app_settings: Settings,
    mock_org_repo: AsyncMock,
    mock_auth_repo: AsyncMock,
    mock_api_key_service: AsyncMock,
    sample_user: User,
) -> FastAPI:
    """Create test app with all API routes, authenticated as the sample user."""
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api/v1")
    app.dependency_overrides[get_settings] = lambda: app_settings
    app.dependency_overrides[get_org_repo] = lambda: mock_org_repo
    app.dependency_overrides[get_auth_repo] = lambda: mock_auth_repo
    app.dependency_overrides[get_api_key_service] = lambda: mock_api_key_service
    app.dependency_overrides[verify_api_key] = lambda: sample_user
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client."""
    return TestClient(app)
