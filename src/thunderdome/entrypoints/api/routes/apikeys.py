"""User API key routes."""

from __future__ import annotations

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from thunderdome.core.auth.types import APIKey
from thunderdome.core.exceptions import ThunderdomeError
from thunderdome.entrypoints.api.deps import ApiKeyServiceDep
from thunderdome.entrypoints.api.middleware.auth import require_self
from thunderdome.entrypoints.api.responses import (
    ApiFailure,
    Envelope,
    failure_on_error,
    status_for_error,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/users/{user_id}/apikeys",
    tags=["apikeys"],
    dependencies=[Depends(require_self)],
)


class ApiKeyCreate(BaseModel):
    """API key creation request."""

    name: Annotated[str, Field(min_length=1, max_length=256)]


class ApiKeyUpdate(BaseModel):
    """API key update request (active flag only)."""

    active: bool


@router.get("", response_model=Envelope[list[APIKey]])
async def list_api_keys(user_id: UUID, service: ApiKeyServiceDep) -> Envelope[list[APIKey]]:
    """List the user's API keys."""
    with failure_on_error():
        keys = await service.list_user_api_keys(user_id)
    return Envelope(data=keys)


@router.post("", response_model=Envelope[APIKey])
async def create_api_key(
    user_id: UUID,
    body: ApiKeyCreate,
    service: ApiKeyServiceDep,
) -> Envelope[APIKey]:
    """Generate an API key.

    The response is the only time the plaintext key is returned.
    """
    try:
        key = await service.generate_api_key(user_id, body.name)
    except ThunderdomeError as e:
        raise ApiFailure(status_for_error(e), e) from e
    return Envelope(data=key)


@router.put("/{key_id}", response_model=Envelope[list[APIKey]])
async def update_api_key(
    user_id: UUID,
    key_id: str,
    body: ApiKeyUpdate,
    service: ApiKeyServiceDep,
) -> Envelope[list[APIKey]]:
    """Activate or deactivate an API key."""
    with failure_on_error():
        keys = await service.update_user_api_key(user_id, key_id, body.active)
    return Envelope(data=keys)


@router.delete("/{key_id}", response_model=Envelope[list[APIKey]])
async def delete_api_key(
    user_id: UUID,
    key_id: str,
    service: ApiKeyServiceDep,
) -> Envelope[list[APIKey]]:
    """Delete an API key."""
    with failure_on_error():
        keys = await service.delete_user_api_key(user_id, key_id)
    logger.info("Deleted API key for user %s", user_id)
    return Envelope(data=keys)
