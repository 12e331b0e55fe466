"""Unit tests for role resolution dependencies."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock
from uuid import UUID, uuid4

import pytest
from fastapi import HTTPException

from thunderdome.core.auth.types import User
from thunderdome.core.exceptions import PersistenceError
from thunderdome.core.org.types import DepartmentRoles, MemberRole, TeamRoles
from thunderdome.entrypoints.api.middleware.roles import (
    require_department_admin,
    require_department_user,
    require_org_admin,
    require_org_user,
    require_team_admin,
    require_team_user,
)

ADMIN = MemberRole.ADMIN
MEMBER = MemberRole.MEMBER


@pytest.fixture
def mock_request() -> MagicMock:
    """Return a mock request with an empty state."""
    request = MagicMock()
    request.state = MagicMock()
    return request


class TestOrganizationRoles:
    """Tests for organization role dependencies."""

    async def test_member_is_stored(
        self,
        mock_request: MagicMock,
        mock_org_repo: AsyncMock,
        sample_user: User,
        sample_org_id: UUID,
    ) -> None:
        """Test that the role is resolved and stored on the request."""
        mock_org_repo.get_organization_role.return_value = MEMBER

        role = await require_org_user(mock_request, sample_org_id, sample_user, mock_org_repo)

        assert role == MEMBER
        assert mock_request.state.org_role == MEMBER
        mock_org_repo.get_organization_role.assert_awaited_once_with(
            sample_user.id, sample_org_id
        )

    async def test_non_member_is_unauthorized(
        self, mock_request: MagicMock, mock_org_repo: AsyncMock, sample_user: User
    ) -> None:
        """Test that callers without a role get 401."""
        mock_org_repo.get_organization_role.return_value = None

        with pytest.raises(HTTPException) as exc_info:
            await require_org_user(mock_request, uuid4(), sample_user, mock_org_repo)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "ORGANIZATION_USER_REQUIRED"

    async def test_lookup_failure_is_server_error(
        self, mock_request: MagicMock, mock_org_repo: AsyncMock, sample_user: User
    ) -> None:
        """Test that store failures surface as 500."""
        mock_org_repo.get_organization_role.side_effect = PersistenceError(
            "unable to get organization role"
        )

        with pytest.raises(HTTPException) as exc_info:
            await require_org_user(mock_request, uuid4(), sample_user, mock_org_repo)

        assert exc_info.value.status_code == 500

    async def test_admin_required(self) -> None:
        """Test that members are forbidden from admin routes."""
        assert await require_org_admin(ADMIN) == ADMIN

        with pytest.raises(HTTPException) as exc_info:
            await require_org_admin(MEMBER)

        assert exc_info.value.status_code == 403
        assert exc_info.value.detail == "ORGANIZATION_ADMIN_REQUIRED"


class TestDepartmentRoles:
    """Tests for department role dependencies."""

    @pytest.mark.parametrize(
        ("org_role", "department_role"),
        [(ADMIN, None), (MEMBER, MEMBER), (MEMBER, ADMIN)],
    )
    async def test_access_granted(
        self,
        mock_request: MagicMock,
        mock_org_repo: AsyncMock,
        sample_user: User,
        org_role: MemberRole,
        department_role: MemberRole | None,
    ) -> None:
        """Test that org admins and department members get access."""
        mock_org_repo.get_department_roles.return_value = DepartmentRoles(
            organization_role=org_role, department_role=department_role
        )

        await require_department_user(mock_request, uuid4(), uuid4(), sample_user, mock_org_repo)

        assert mock_request.state.org_role == org_role
        assert mock_request.state.department_role == department_role

    @pytest.mark.parametrize(
        "roles",
        [DepartmentRoles(), DepartmentRoles(organization_role=MEMBER)],
    )
    async def test_access_denied(
        self,
        mock_request: MagicMock,
        mock_org_repo: AsyncMock,
        sample_user: User,
        roles: DepartmentRoles,
    ) -> None:
        """Test that org members outside the department get 401."""
        mock_org_repo.get_department_roles.return_value = roles

        with pytest.raises(HTTPException) as exc_info:
            await require_department_user(
                mock_request, uuid4(), uuid4(), sample_user, mock_org_repo
            )

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "DEPARTMENT_USER_REQUIRED"

    async def test_admin_required(self) -> None:
        """Test that org or department admins pass and members are forbidden."""
        await require_department_admin(DepartmentRoles(organization_role=ADMIN))
        await require_department_admin(
            DepartmentRoles(organization_role=MEMBER, department_role=ADMIN)
        )

        with pytest.raises(HTTPException) as exc_info:
            await require_department_admin(
                DepartmentRoles(organization_role=MEMBER, department_role=MEMBER)
            )

        assert exc_info.value.status_code == 403
        assert exc_info.value.detail == "DEPARTMENT_ADMIN_REQUIRED"


class TestTeamRoles:
    """Tests for team role dependencies."""

    @pytest.mark.parametrize(
        "roles",
        [
            TeamRoles(organization_role=ADMIN),
            TeamRoles(organization_role=MEMBER, department_role=ADMIN),
            TeamRoles(organization_role=MEMBER, department_role=MEMBER, team_role=MEMBER),
        ],
    )
    async def test_access_granted(
        self,
        mock_request: MagicMock,
        mock_org_repo: AsyncMock,
        sample_user: User,
        roles: TeamRoles,
    ) -> None:
        """Test that parent admins and team members get access."""
        mock_org_repo.get_team_roles.return_value = roles

        await require_team_user(
            mock_request, uuid4(), uuid4(), uuid4(), sample_user, mock_org_repo
        )

        assert mock_request.state.team_role == roles.team_role

    async def test_department_member_without_team_role(
        self, mock_request: MagicMock, mock_org_repo: AsyncMock, sample_user: User
    ) -> None:
        """Test that department members outside the team get 401."""
        mock_org_repo.get_team_roles.return_value = TeamRoles(
            organization_role=MEMBER, department_role=MEMBER
        )

        with pytest.raises(HTTPException) as exc_info:
            await require_team_user(
                mock_request, uuid4(), uuid4(), uuid4(), sample_user, mock_org_repo
            )

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "TEAM_USER_REQUIRED"

    async def test_admin_required(self) -> None:
        """Test that team admins pass and team members are forbidden."""
        await require_team_admin(
            TeamRoles(organization_role=MEMBER, department_role=MEMBER, team_role=ADMIN)
        )

        with pytest.raises(HTTPException) as exc_info:
            await require_team_admin(
                TeamRoles(organization_role=MEMBER, department_role=MEMBER, team_role=MEMBER)
            )

        assert exc_info.value.status_code == 403
        assert exc_info.value.detail == "TEAM_ADMIN_REQUIRED"
