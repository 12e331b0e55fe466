"""Organization hierarchy domain."""

from thunderdome.core.org.repository import OrganizationRepository
from thunderdome.core.org.types import (
    Department,
    DepartmentRoles,
    Member,
    MemberRole,
    Organization,
    Team,
    TeamRoles,
    UserOrganization,
)

__all__ = [
    "Department",
    "DepartmentRoles",
    "Member",
    "MemberRole",
    "Organization",
    "OrganizationRepository",
    "Team",
    "TeamRoles",
    "UserOrganization",
]
