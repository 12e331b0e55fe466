"""PostgreSQL implementation of OrganizationRepository."""

from typing import Any
from uuid import UUID

import structlog

from thunderdome.adapters.db.app_db import AppDatabase
from thunderdome.adapters.db.errors import persistence_errors
from thunderdome.core.exceptions import EINVALID, NotFoundError, PersistenceError, ThunderdomeError
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

logger = structlog.get_logger()

ORG_COLUMNS = "o.id, o.name, o.created_at, o.updated_at"
DEPARTMENT_COLUMNS = "d.id, d.organization_id, d.name, d.created_at, d.updated_at"
TEAM_COLUMNS = "t.id, t.name, t.organization_id, t.department_id, t.created_at, t.updated_at"


def _role(value: str | None) -> MemberRole | None:
    return MemberRole(value) if value else None


class PostgresOrganizationRepository:
    """PostgreSQL implementation of organization repository."""

    def __init__(self, db: AppDatabase) -> None:
        """Initialize with database connection.

        Args:
            db: Application database instance.
        """
        self._db = db

    def _row_to_org(self, row: dict[str, Any]) -> Organization:
        """Convert database row to Organization model."""
        return Organization(
            id=row["id"],
            name=row["name"],
            created_at=row["created_at"],
            updated_at=row.get("updated_at"),
        )

    def _row_to_department(self, row: dict[str, Any]) -> Department:
        """Convert database row to Department model."""
        return Department(
            id=row["id"],
            organization_id=row["organization_id"],
            name=row["name"],
            created_at=row["created_at"],
            updated_at=row.get("updated_at"),
        )

    def _row_to_team(self, row: dict[str, Any]) -> Team:
        """Convert database row to Team model."""
        return Team(
            id=row["id"],
            name=row["name"],
            organization_id=row.get("organization_id"),
            department_id=row.get("department_id"),
            created_at=row["created_at"],
            updated_at=row.get("updated_at"),
        )

    def _row_to_member(self, row: dict[str, Any]) -> Member:
        """Convert database row to Member model."""
        return Member(
            user_id=row["user_id"],
            name=row["name"],
            email=row.get("email"),
            role=MemberRole(row["role"]),
        )

    # Organization operations
    async def list_user_organizations(
        self, user_id: UUID, limit: int, offset: int
    ) -> list[UserOrganization]:
        """List the organizations a user belongs to with their roles."""
        with persistence_errors("unable to get organizations", user_id=str(user_id)):
            rows = await self._db.fetch_all(
                f"""
                SELECT {ORG_COLUMNS}, ou.role
                FROM organization_users ou
                JOIN organizations o ON o.id = ou.organization_id
                WHERE ou.user_id = $1
                ORDER BY o.created_at
                LIMIT $2 OFFSET $3
                """,
                user_id,
                limit,
                offset,
            )
        return [
            UserOrganization(organization=self._row_to_org(row), role=MemberRole(row["role"]))
            for row in rows
        ]

    async def get_organization(self, org_id: UUID) -> Organization:
        """Get organization by ID."""
        with persistence_errors("unable to get organization", org_id=str(org_id)):
            row = await self._db.fetch_one(
                f"SELECT {ORG_COLUMNS} FROM organizations o WHERE o.id = $1",
                org_id,
            )
        if not row:
            raise NotFoundError("ORGANIZATION_NOT_FOUND")
        return self._row_to_org(row)

    async def create_organization(self, user_id: UUID, name: str) -> Organization:
        """Create an organization with the user as its admin."""
        with persistence_errors("unable to create organization", user_id=str(user_id)):
            async with self._db.transaction() as conn:
                row = await conn.fetchrow(
                    """
                    INSERT INTO organizations (name) VALUES ($1)
                    RETURNING id, name, created_at, updated_at
                    """,
                    name,
                )
                if row is None:
                    raise PersistenceError("unable to create organization")
                await conn.execute(
                    """
                    INSERT INTO organization_users (organization_id, user_id, role)
                    VALUES ($1, $2, $3)
                    """,
                    row["id"],
                    user_id,
                    MemberRole.ADMIN.value,
                )
        org = self._row_to_org(dict(row))
        logger.info("organization_created", org_id=str(org.id), user_id=str(user_id))
        return org

    async def get_organization_role(self, user_id: UUID, org_id: UUID) -> MemberRole | None:
        """Get a user's organization role, None when not a member."""
        with persistence_errors("unable to get organization role", org_id=str(org_id)):
            role = await self._db.fetch_value(
                """
                SELECT role FROM organization_users
                WHERE organization_id = $1 AND user_id = $2
                """,
                org_id,
                user_id,
            )
        return _role(role)

    async def list_organization_users(self, org_id: UUID, limit: int, offset: int) -> list[Member]:
        """List organization members."""
        with persistence_errors("unable to get organization users", org_id=str(org_id)):
            rows = await self._db.fetch_all(
                """
                SELECT u.id AS user_id, u.name, u.email, ou.role
                FROM organization_users ou
                JOIN users u ON u.id = ou.user_id
                WHERE ou.organization_id = $1
                ORDER BY ou.created_at
                LIMIT $2 OFFSET $3
                """,
                org_id,
                limit,
                offset,
            )
        return [self._row_to_member(row) for row in rows]

    async def add_organization_user(self, org_id: UUID, user_id: UUID, role: MemberRole) -> None:
        """Add a user to an organization, updating the role if already a member."""
        with persistence_errors("unable to add organization user", org_id=str(org_id)):
            await self._db.execute(
                """
                INSERT INTO organization_users (organization_id, user_id, role)
                VALUES ($1, $2, $3)
                ON CONFLICT (organization_id, user_id)
                DO UPDATE SET role = EXCLUDED.role, updated_at = NOW()
                """,
                org_id,
                user_id,
                role.value,
            )

    async def remove_organization_user(self, org_id: UUID, user_id: UUID) -> None:
        """Remove a user from an organization and its departments and teams."""
        with persistence_errors("unable to remove organization user", org_id=str(org_id)):
            async with self._db.transaction() as conn:
                await conn.execute(
                    """
                    DELETE FROM team_users
                    WHERE user_id = $2 AND team_id IN (
                        SELECT t.id FROM teams t
                        LEFT JOIN departments d ON d.id = t.department_id
                        WHERE t.organization_id = $1 OR d.organization_id = $1
                    )
                    """,
                    org_id,
                    user_id,
                )
                await conn.execute(
                    """
                    DELETE FROM department_users
                    WHERE user_id = $2 AND department_id IN (
                        SELECT id FROM departments WHERE organization_id = $1
                    )
                    """,
                    org_id,
                    user_id,
                )
                await conn.execute(
                    "DELETE FROM organization_users WHERE organization_id = $1 AND user_id = $2",
                    org_id,
                    user_id,
                )

    async def list_organization_teams(self, org_id: UUID, limit: int, offset: int) -> list[Team]:
        """List teams owned directly by an organization."""
        with persistence_errors("unable to get organization teams", org_id=str(org_id)):
            rows = await self._db.fetch_all(
                f"""
                SELECT {TEAM_COLUMNS} FROM teams t
                WHERE t.organization_id = $1
                ORDER BY t.created_at
                LIMIT $2 OFFSET $3
                """,
                org_id,
                limit,
                offset,
            )
        return [self._row_to_team(row) for row in rows]

    async def create_organization_team(self, org_id: UUID, name: str) -> Team:
        """Create a team owned directly by an organization."""
        with persistence_errors("unable to create organization team", org_id=str(org_id)):
            row = await self._db.execute_returning(
                """
                INSERT INTO teams (name, organization_id) VALUES ($1, $2)
                RETURNING id, name, organization_id, department_id, created_at, updated_at
                """,
                name,
                org_id,
            )
        if row is None:
            raise PersistenceError("unable to create organization team")
        return self._row_to_team(row)

    # Department operations
    async def list_departments(self, org_id: UUID, limit: int, offset: int) -> list[Department]:
        """List an organization's departments."""
        with persistence_errors("unable to get departments", org_id=str(org_id)):
            rows = await self._db.fetch_all(
                f"""
                SELECT {DEPARTMENT_COLUMNS} FROM departments d
                WHERE d.organization_id = $1
                ORDER BY d.created_at
                LIMIT $2 OFFSET $3
                """,
                org_id,
                limit,
                offset,
            )
        return [self._row_to_department(row) for row in rows]

    async def get_department(self, department_id: UUID) -> Department:
        """Get department by ID."""
        with persistence_errors("unable to get department", department_id=str(department_id)):
            row = await self._db.fetch_one(
                f"SELECT {DEPARTMENT_COLUMNS} FROM departments d WHERE d.id = $1",
                department_id,
            )
        if not row:
            raise NotFoundError("DEPARTMENT_NOT_FOUND")
        return self._row_to_department(row)

    async def create_department(self, org_id: UUID, name: str) -> Department:
        """Create a department in an organization."""
        with persistence_errors("unable to create department", org_id=str(org_id)):
            row = await self._db.execute_returning(
                """
                INSERT INTO departments (organization_id, name) VALUES ($1, $2)
                RETURNING id, organization_id, name, created_at, updated_at
                """,
                org_id,
                name,
            )
        if row is None:
            raise PersistenceError("unable to create department")
        department = self._row_to_department(row)
        logger.info("department_created", org_id=str(org_id), department_id=str(department.id))
        return department

    async def get_department_roles(
        self, user_id: UUID, org_id: UUID, department_id: UUID
    ) -> DepartmentRoles:
        """Get a user's organization and department roles.

        Both roles are None when the department is not part of the
        organization or the user is not an organization member.
        """
        with persistence_errors("unable to get department role", department_id=str(department_id)):
            row = await self._db.fetch_one(
                """
                SELECT ou.role AS organization_role, du.role AS department_role
                FROM departments d
                JOIN organization_users ou
                    ON ou.organization_id = d.organization_id AND ou.user_id = $1
                LEFT JOIN department_users du
                    ON du.department_id = d.id AND du.user_id = $1
                WHERE d.id = $3 AND d.organization_id = $2
                """,
                user_id,
                org_id,
                department_id,
            )
        if not row:
            return DepartmentRoles()
        return DepartmentRoles(
            organization_role=_role(row["organization_role"]),
            department_role=_role(row["department_role"]),
        )

    async def list_department_users(
        self, department_id: UUID, limit: int, offset: int
    ) -> list[Member]:
        """List department members."""
        with persistence_errors("unable to get department users", department_id=str(department_id)):
            rows = await self._db.fetch_all(
                """
                SELECT u.id AS user_id, u.name, u.email, du.role
                FROM department_users du
                JOIN users u ON u.id = du.user_id
                WHERE du.department_id = $1
                ORDER BY du.created_at
                LIMIT $2 OFFSET $3
                """,
                department_id,
                limit,
                offset,
            )
        return [self._row_to_member(row) for row in rows]

    async def add_department_user(
        self, department_id: UUID, user_id: UUID, role: MemberRole
    ) -> None:
        """Add an organization member to a department.

        Raises:
            ThunderdomeError: If the user is not a member of the department's
                organization.
        """
        with persistence_errors("unable to add department user", department_id=str(department_id)):
            row = await self._db.execute_returning(
                """
                INSERT INTO department_users (department_id, user_id, role)
                SELECT d.id, ou.user_id, $3
                FROM departments d
                JOIN organization_users ou
                    ON ou.organization_id = d.organization_id AND ou.user_id = $2
                WHERE d.id = $1
                ON CONFLICT (department_id, user_id)
                DO UPDATE SET role = EXCLUDED.role, updated_at = NOW()
                RETURNING id
                """,
                department_id,
                user_id,
                role.value,
            )
        if row is None:
            raise ThunderdomeError(EINVALID, "ORGANIZATION_USER_REQUIRED")

    async def remove_department_user(self, department_id: UUID, user_id: UUID) -> None:
        """Remove a user from a department and its teams."""
        with persistence_errors(
            "unable to remove department user", department_id=str(department_id)
        ):
            async with self._db.transaction() as conn:
                await conn.execute(
                    """
                    DELETE FROM team_users
                    WHERE user_id = $2 AND team_id IN (
                        SELECT id FROM teams WHERE department_id = $1
                    )
                    """,
                    department_id,
                    user_id,
                )
                await conn.execute(
                    "DELETE FROM department_users WHERE department_id = $1 AND user_id = $2",
                    department_id,
                    user_id,
                )

    async def list_department_teams(
        self, department_id: UUID, limit: int, offset: int
    ) -> list[Team]:
        """List a department's teams."""
        with persistence_errors("unable to get department teams", department_id=str(department_id)):
            rows = await self._db.fetch_all(
                f"""
                SELECT {TEAM_COLUMNS} FROM teams t
                WHERE t.department_id = $1
                ORDER BY t.created_at
                LIMIT $2 OFFSET $3
                """,
                department_id,
                limit,
                offset,
            )
        return [self._row_to_team(row) for row in rows]

    async def create_department_team(self, department_id: UUID, name: str) -> Team:
        """Create a team in a department."""
        with persistence_errors(
            "unable to create department team", department_id=str(department_id)
        ):
            row = await self._db.execute_returning(
                """
                INSERT INTO teams (name, department_id) VALUES ($1, $2)
                RETURNING id, name, organization_id, department_id, created_at, updated_at
                """,
                name,
                department_id,
            )
        if row is None:
            raise PersistenceError("unable to create department team")
        return self._row_to_team(row)

    # Team operations
    async def get_team(self, team_id: UUID) -> Team:
        """Get team by ID."""
        with persistence_errors("unable to get team", team_id=str(team_id)):
            row = await self._db.fetch_one(
                f"SELECT {TEAM_COLUMNS} FROM teams t WHERE t.id = $1",
                team_id,
            )
        if not row:
            raise NotFoundError("TEAM_NOT_FOUND")
        return self._row_to_team(row)

    async def get_team_roles(
        self, user_id: UUID, org_id: UUID, department_id: UUID, team_id: UUID
    ) -> TeamRoles:
        """Get a user's organization, department and team roles.

        All roles are None when the team is not part of the department, the
        department is not part of the organization, or the user is not an
        organization member.
        """
        with persistence_errors("unable to get team role", team_id=str(team_id)):
            row = await self._db.fetch_one(
                """
                SELECT ou.role AS organization_role, du.role AS department_role,
                       tu.role AS team_role
                FROM teams t
                JOIN departments d ON d.id = t.department_id
                JOIN organization_users ou
                    ON ou.organization_id = d.organization_id AND ou.user_id = $1
                LEFT JOIN department_users du
                    ON du.department_id = d.id AND du.user_id = $1
                LEFT JOIN team_users tu
                    ON tu.team_id = t.id AND tu.user_id = $1
                WHERE t.id = $4 AND d.id = $3 AND d.organization_id = $2
                """,
                user_id,
                org_id,
                department_id,
                team_id,
            )
        if not row:
            return TeamRoles()
        return TeamRoles(
            organization_role=_role(row["organization_role"]),
            department_role=_role(row["department_role"]),
            team_role=_role(row["team_role"]),
        )

    async def list_team_users(self, team_id: UUID, limit: int, offset: int) -> list[Member]:
        """List team members."""
        with persistence_errors("unable to get team users", team_id=str(team_id)):
            rows = await self._db.fetch_all(
                """
                SELECT u.id AS user_id, u.name, u.email, tu.role
                FROM team_users tu
                JOIN users u ON u.id = tu.user_id
                WHERE tu.team_id = $1
                ORDER BY tu.created_at
                LIMIT $2 OFFSET $3
                """,
                team_id,
                limit,
                offset,
            )
        return [self._row_to_member(row) for row in rows]

    async def add_team_user(self, team_id: UUID, user_id: UUID, role: MemberRole) -> None:
        """Add a user to a team, updating the role if already a member."""
        with persistence_errors("unable to add team user", team_id=str(team_id)):
            await self._db.execute(
                """
                INSERT INTO team_users (team_id, user_id, role)
                VALUES ($1, $2, $3)
                ON CONFLICT (team_id, user_id)
                DO UPDATE SET role = EXCLUDED.role, updated_at = NOW()
                """,
                team_id,
                user_id,
                role.value,
            )

    async def remove_team_user(self, team_id: UUID, user_id: UUID) -> None:
        """Remove a user from a team."""
        with persistence_errors("unable to remove team user", team_id=str(team_id)):
            await self._db.execute(
                "DELETE FROM team_users WHERE team_id = $1 AND user_id = $2",
                team_id,
                user_id,
            )
