"""API Key authentication middleware."""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends, Request, Security, status
from fastapi.security import APIKeyHeader

from thunderdome.core.auth.types import User, UserType
from thunderdome.core.exceptions import EUNAUTHORIZED, ThunderdomeError
from thunderdome.entrypoints.api.deps import ApiKeyServiceDep
from thunderdome.entrypoints.api.responses import ApiFailure

logger = structlog.get_logger()

API_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=False)


async def verify_api_key(
    request: Request,
    service: ApiKeyServiceDep,
    api_key: str | None = Security(API_KEY_HEADER),
) -> User:
    """Verify API key and return the owning user.

    The user is also stored on ``request.state.user`` for downstream use.
    """
    if not api_key:
        raise ApiFailure(
            status.HTTP_401_UNAUTHORIZED,
            ThunderdomeError(EUNAUTHORIZED, "REQUIRES_API_KEY"),
        )

    try:
        user = await service.get_api_key_user(api_key)
    except ThunderdomeError as e:
        raise ApiFailure(status.HTTP_401_UNAUTHORIZED, e) from e

    request.state.user = user

    logger.debug("api_key_verified", user_id=str(user.id))

    return user


AuthUser = Annotated[User, Depends(verify_api_key)]


async def require_self(user_id: UUID, user: AuthUser) -> User:
    """Require the authenticated user to be the user named in the path.

    Global admins may act on any user.
    """
    if user.id != user_id and user.type != UserType.ADMIN:
        raise ApiFailure(
            status.HTTP_403_FORBIDDEN,
            ThunderdomeError(EUNAUTHORIZED, "INVALID_USER"),
        )
    return user
