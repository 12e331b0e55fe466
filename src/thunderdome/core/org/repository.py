"""Organization repository protocol for database operations."""

from typing import Protocol, runtime_checkable
from uuid import UUID

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


@runtime_checkable
class OrganizationRepository(Protocol):
    """Protocol for organization, department and team operations.

    Getters raise NotFoundError for unknown IDs; store failures are raised
    as PersistenceError.
    """

    # Organization operations
    async def list_user_organizations(
        self, user_id: UUID, limit: int, offset: int
    ) -> list[UserOrganization]:
        """List the organizations a user belongs to with their roles."""
        ...

    async def get_organization(self, org_id: UUID) -> Organization:
        """Get organization by ID."""
        ...

    async def create_organization(self, user_id: UUID, name: str) -> Organization:
        """Create an organization with the user as its admin."""
        ...

    async def get_organization_role(self, user_id: UUID, org_id: UUID) -> MemberRole | None:
        """Get a user's organization role, None when not a member."""
        ...

    async def list_organization_users(self, org_id: UUID, limit: int, offset: int) -> list[Member]:
        """List organization members."""
        ...

    async def add_organization_user(self, org_id: UUID, user_id: UUID, role: MemberRole) -> None:
        """Add a user to an organization."""
        ...

    async def remove_organization_user(self, org_id: UUID, user_id: UUID) -> None:
        """Remove a user from an organization and its departments and teams."""
        ...

    async def list_organization_teams(self, org_id: UUID, limit: int, offset: int) -> list[Team]:
        """List teams owned directly by an organization."""
        ...

    async def create_organization_team(self, org_id: UUID, name: str) -> Team:
        """Create a team owned directly by an organization."""
        ...

    # Department operations
    async def list_departments(self, org_id: UUID, limit: int, offset: int) -> list[Department]:
        """List an organization's departments."""
        ...

    async def get_department(self, department_id: UUID) -> Department:
        """Get department by ID."""
        ...

    async def create_department(self, org_id: UUID, name: str) -> Department:
        """Create a department in an organization."""
        ...

    async def get_department_roles(
        self, user_id: UUID, org_id: UUID, department_id: UUID
    ) -> DepartmentRoles:
        """Get a user's organization and department roles."""
        ...

    async def list_department_users(
        self, department_id: UUID, limit: int, offset: int
    ) -> list[Member]:
        """List department members."""
        ...

    async def add_department_user(
        self, department_id: UUID, user_id: UUID, role: MemberRole
    ) -> None:
        """Add an organization member to a department."""
        ...

    async def remove_department_user(self, department_id: UUID, user_id: UUID) -> None:
        """Remove a user from a department and its teams."""
        ...

    async def list_department_teams(
        self, department_id: UUID, limit: int, offset: int
    ) -> list[Team]:
        """List a department's teams."""
        ...

    async def create_department_team(self, department_id: UUID, name: str) -> Team:
        """Create a team in a department."""
        ...

    # Team operations
    async def get_team(self, team_id: UUID) -> Team:
        """Get team by ID."""
        ...

    async def get_team_roles(
        self, user_id: UUID, org_id: UUID, department_id: UUID, team_id: UUID
    ) -> TeamRoles:
        """Get a user's organization, department and team roles."""
        ...

    async def list_team_users(self, team_id: UUID, limit: int, offset: int) -> list[Member]:
        """List team members."""
        ...

    async def add_team_user(self, team_id: UUID, user_id: UUID, role: MemberRole) -> None:
        """Add a user to a team."""
        ...

    async def remove_team_user(self, team_id: UUID, user_id: UUID) -> None:
        """Remove a user from a team."""
        ...
