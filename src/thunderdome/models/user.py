"""User model."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from thunderdome.models.base import BaseModel

if TYPE_CHECKING:
    from thunderdome.models.api_key import ApiKey


class User(BaseModel):
    """A user in the system."""

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(64), nullable=False)
    email: Mapped[str | None] = mapped_column(String(320), unique=True, nullable=True)
    type: Mapped[str] = mapped_column(
        String(32), nullable=False, server_default=text("'REGISTERED'")
    )  # GUEST, REGISTERED, ADMIN
    avatar: Mapped[str] = mapped_column(
        String(128), nullable=False, server_default=text("'robohash'")
    )
    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("false"))
    notifications_enabled: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("true")
    )
    country: Mapped[str | None] = mapped_column(String(2), nullable=True)
    locale: Mapped[str | None] = mapped_column(String(2), nullable=True)
    company: Mapped[str | None] = mapped_column(String(256), nullable=True)
    job_title: Mapped[str | None] = mapped_column(String(128), nullable=True)
    last_active: Mapped[datetime | None] = mapped_column(nullable=True)

    # Relationships
    api_keys: Mapped[list["ApiKey"]] = relationship(
        "ApiKey", back_populates="user", cascade="all, delete-orphan"
    )
