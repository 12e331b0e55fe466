"""Organization hierarchy domain types."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, computed_field

from thunderdome.core.auth.types import gravatar_hash


class MemberRole(str, Enum):
    """Membership roles, scoped per organization, department or team."""

    MEMBER = "MEMBER"
    ADMIN = "ADMIN"


class Organization(BaseModel):
    """Top level of the tenancy hierarchy."""

    id: UUID
    name: str
    created_at: datetime
    updated_at: datetime | None = None


class Department(BaseModel):
    """A department inside an organization."""

    id: UUID
    organization_id: UUID
    name: str
    created_at: datetime
    updated_at: datetime | None = None


class Team(BaseModel):
    """A team, owned by an organization or by one of its departments."""

    id: UUID
    name: str
    organization_id: UUID | None = None
    department_id: UUID | None = None
    created_at: datetime
    updated_at: datetime | None = None


class UserOrganization(BaseModel):
    """An organization together with the user's role in it."""

    organization: Organization
    role: MemberRole


class Member(BaseModel):
    """A user's membership in an organization, department or team."""

    user_id: UUID
    name: str
    email: str | None = None
    role: MemberRole

    @computed_field  # type: ignore[prop-decorator]
    @property
    def gravatar_hash(self) -> str:
        """Gravatar hash derived from the member's email."""
        return gravatar_hash(self.email)


class DepartmentRoles(BaseModel):
    """A user's roles along the organization → department path."""

    organization_role: MemberRole | None = None
    department_role: MemberRole | None = None


class TeamRoles(DepartmentRoles):
    """A user's roles along the organization → department → team path."""

    team_role: MemberRole | None = None
