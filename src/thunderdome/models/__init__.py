"""SQLAlchemy models for the application database."""

from thunderdome.models.base import BaseModel, metadata
from thunderdome.models.user import User
from thunderdome.models.api_key import ApiKey
from thunderdome.models.organization import (
    Department,
    DepartmentUser,
    Organization,
    OrganizationUser,
    Team,
    TeamUser,
)

__all__ = [
    "BaseModel",
    "metadata",
    "User",
    "ApiKey",
    "Organization",
    "OrganizationUser",
    "Department",
    "DepartmentUser",
    "Team",
    "TeamUser",
]
