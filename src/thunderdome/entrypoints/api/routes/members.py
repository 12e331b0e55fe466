"""Request bodies and helpers shared by the membership routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import status
from pydantic import BaseModel, EmailStr, Field

from thunderdome.core.auth.repository import AuthRepository
from thunderdome.core.auth.types import User
from thunderdome.core.exceptions import ENOTFOUND, ThunderdomeError
from thunderdome.core.org.types import MemberRole
from thunderdome.entrypoints.api.responses import ApiFailure, failure_on_error

NAME_MAX_LENGTH = 256


class NameCreate(BaseModel):
    """Creation request for organizations, departments and teams."""

    name: Annotated[str, Field(min_length=1, max_length=NAME_MAX_LENGTH)]


class MemberAdd(BaseModel):
    """Request to add a user (by email) with a role."""

    email: EmailStr
    role: MemberRole = MemberRole.MEMBER


async def user_for_email(repo: AuthRepository, email: str) -> User:
    """Look up the user for a membership request.

    Emails are matched lower-cased. An unknown email is a server-side
    failure (500 ``USER_NOT_FOUND``).
    """
    with failure_on_error():
        user = await repo.get_user_by_email(email.lower())
    if user is None:
        raise ApiFailure(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ThunderdomeError(ENOTFOUND, "USER_NOT_FOUND"),
        )
    return user
