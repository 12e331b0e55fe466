"""Auth domain types."""

import hashlib
from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, computed_field


class UserType(str, Enum):
    """Account types."""

    GUEST = "GUEST"
    REGISTERED = "REGISTERED"
    ADMIN = "ADMIN"


def gravatar_hash(email: str | None) -> str:
    """Compute the Gravatar hash for an email address."""
    normalized = (email or "").strip().lower()
    return hashlib.md5(normalized.encode("utf-8"), usedforsecurity=False).hexdigest()


class User(BaseModel):
    """User domain model."""

    id: UUID
    name: str
    email: str | None = None
    type: UserType = UserType.REGISTERED
    avatar: str = "robohash"
    verified: bool = False
    notifications_enabled: bool = True
    country: str = ""
    locale: str = ""
    company: str = ""
    job_title: str = ""
    created_at: datetime
    updated_at: datetime | None = None
    last_active: datetime | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def gravatar_hash(self) -> str:
        """Gravatar hash derived from the user's email."""
        return gravatar_hash(self.email)


class APIKey(BaseModel):
    """API key owned by a user.

    ``key`` holds the plaintext presented key and is only set on the
    result of key generation; it cannot be retrieved afterwards.
    """

    id: str
    prefix: str
    name: str
    user_id: UUID
    active: bool = True
    created_at: datetime
    updated_at: datetime | None = None
    key: str | None = None
