"""API Key model for authentication."""

from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from thunderdome.models.base import BaseModel

if TYPE_CHECKING:
    from thunderdome.models.user import User


class ApiKey(BaseModel):
    """API key for programmatic access."""

    __tablename__ = "api_keys"

    # <prefix>.<sha256 hex of the presented key>
    id: Mapped[str] = mapped_column(String(128), primary_key=True)  # type: ignore[assignment]
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("true"))

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="api_keys")
