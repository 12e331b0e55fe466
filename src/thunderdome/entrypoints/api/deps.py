"""Dependency injection and application lifespan management."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Annotated

from fastapi import Depends, Query, Request

from thunderdome.adapters.auth import PostgresAuthRepository
from thunderdome.adapters.db.app_db import AppDatabase
from thunderdome.adapters.org import PostgresOrganizationRepository
from thunderdome.core.auth.repository import AuthRepository
from thunderdome.core.org.repository import OrganizationRepository
from thunderdome.services.apikeys import DEFAULT_USER_APIKEY_LIMIT, ApiKeyService

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)

DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 1000


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings loaded from environment."""

    def __init__(self) -> None:
        """Load settings from environment variables."""
        self.database_url = os.getenv("DATABASE_URL", "postgresql://localhost:5432/thunderdome")
        self.app_database_url = os.getenv("APP_DATABASE_URL", self.database_url)
        self.database_pool_min_size = int(os.getenv("DATABASE_POOL_MIN_SIZE", "2"))
        self.database_pool_max_size = int(os.getenv("DATABASE_POOL_MAX_SIZE", "10"))
        self.auto_migrate = _env_flag("AUTO_MIGRATE", False)

        # Feature flags
        self.organizations_enabled = _env_flag("ORGANIZATIONS_ENABLED", True)
        self.user_apikey_limit = int(
            os.getenv("USER_APIKEY_LIMIT", str(DEFAULT_USER_APIKEY_LIMIT))
        )

        self.host = os.getenv("HOST", "0.0.0.0")
        self.port = int(os.getenv("PORT", "8000"))
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        self.cors_origins = [
            origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
        ]


settings = Settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan - setup and teardown.

    This context manager handles:
    - Database connection pool setup
    - Optional schema creation from the models
    """
    app_db = AppDatabase(
        settings.app_database_url,
        min_size=settings.database_pool_min_size,
        max_size=settings.database_pool_max_size,
    )
    await app_db.connect()

    if settings.auto_migrate:
        await app_db.create_schema()

    app.state.app_db = app_db
    logger.info(
        "Application started (organizations_enabled=%s)", settings.organizations_enabled
    )

    try:
        yield
    finally:
        await app_db.close()


def get_settings() -> Settings:
    """Get the application settings."""
    return settings


def get_app_db(request: Request) -> AppDatabase:
    """Get the application database from app state.

    Args:
        request: The current request.

    Returns:
        The configured AppDatabase.
    """
    app_db: AppDatabase = request.app.state.app_db
    return app_db


def get_auth_repo(app_db: Annotated[AppDatabase, Depends(get_app_db)]) -> AuthRepository:
    """Get the auth repository backed by the app database."""
    return PostgresAuthRepository(app_db)


def get_org_repo(app_db: Annotated[AppDatabase, Depends(get_app_db)]) -> OrganizationRepository:
    """Get the organization repository backed by the app database."""
    return PostgresOrganizationRepository(app_db)


def get_api_key_service(
    repo: Annotated[AuthRepository, Depends(get_auth_repo)],
    app_settings: Annotated[Settings, Depends(get_settings)],
) -> ApiKeyService:
    """Get the API key service."""
    return ApiKeyService(repo, key_limit=app_settings.user_apikey_limit)


@dataclass
class Pagination:
    """Limit/offset pagination parameters."""

    limit: int
    offset: int


def get_pagination(
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_LIMIT)] = DEFAULT_PAGE_LIMIT,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> Pagination:
    """Read limit and offset query parameters."""
    return Pagination(limit=limit, offset=offset)


# Annotated types for dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings)]
AuthRepoDep = Annotated[AuthRepository, Depends(get_auth_repo)]
OrgRepoDep = Annotated[OrganizationRepository, Depends(get_org_repo)]
ApiKeyServiceDep = Annotated[ApiKeyService, Depends(get_api_key_service)]
PaginationDep = Annotated[Pagination, Depends(get_pagination)]
