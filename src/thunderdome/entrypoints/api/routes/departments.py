"""Department and department team routes.

All routes are gated by the organizations feature flag. Roles along the
organization / department / team hierarchy are resolved by the role
dependencies and read back from ``request.state``.
"""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel

from thunderdome.core.exceptions import EUNAUTHORIZED, ThunderdomeError
from thunderdome.core.org.types import Department, Member, MemberRole, Organization, Team
from thunderdome.entrypoints.api.deps import AuthRepoDep, OrgRepoDep, PaginationDep
from thunderdome.entrypoints.api.middleware.features import require_organizations_enabled
from thunderdome.entrypoints.api.middleware.roles import (
    require_department_admin,
    require_department_user,
    require_org_admin,
    require_org_user,
    require_team_admin,
    require_team_user,
)
from thunderdome.entrypoints.api.responses import (
    ApiFailure,
    Envelope,
    failure_on_error,
    status_for_error,
)
from thunderdome.entrypoints.api.routes.members import MemberAdd, NameCreate, user_for_email

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/organizations/{org_id}/departments",
    tags=["departments"],
    dependencies=[Depends(require_organizations_enabled)],
)


class DepartmentDetail(BaseModel):
    """A department, its organization and the caller's roles."""

    organization: Organization
    department: Department
    organization_role: MemberRole | None = None
    department_role: MemberRole | None = None


class TeamDetail(DepartmentDetail):
    """A department team with its parents and the caller's roles."""

    team: Team
    team_role: MemberRole | None = None


@router.get(
    "",
    response_model=Envelope[list[Department]],
    dependencies=[Depends(require_org_user)],
)
async def list_departments(
    org_id: UUID,
    repo: OrgRepoDep,
    page: PaginationDep,
) -> Envelope[list[Department]]:
    """List the organization's departments."""
    with failure_on_error():
        departments = await repo.list_departments(org_id, page.limit, page.offset)
    return Envelope(data=departments)


@router.post(
    "",
    response_model=Envelope[Department],
    dependencies=[Depends(require_org_admin)],
)
async def create_department(
    org_id: UUID,
    body: NameCreate,
    repo: OrgRepoDep,
) -> Envelope[Department]:
    """Create a department in the organization."""
    with failure_on_error():
        department = await repo.create_department(org_id, body.name)
    return Envelope(data=department)


@router.get(
    "/{department_id}",
    response_model=Envelope[DepartmentDetail],
    dependencies=[Depends(require_department_user)],
)
async def get_department(
    request: Request,
    org_id: UUID,
    department_id: UUID,
    repo: OrgRepoDep,
) -> Envelope[DepartmentDetail]:
    """Get a department with its organization and the caller's roles."""
    with failure_on_error():
        organization = await repo.get_organization(org_id)
        department = await repo.get_department(department_id)

    return Envelope(
        data=DepartmentDetail(
            organization=organization,
            department=department,
            organization_role=request.state.org_role,
            department_role=request.state.department_role,
        )
    )


@router.get(
    "/{department_id}/teams",
    response_model=Envelope[list[Team]],
    dependencies=[Depends(require_department_user)],
)
async def list_department_teams(
    department_id: UUID,
    repo: OrgRepoDep,
    page: PaginationDep,
) -> Envelope[list[Team]]:
    """List the department's teams."""
    with failure_on_error():
        teams = await repo.list_department_teams(department_id, page.limit, page.offset)
    return Envelope(data=teams)


@router.post(
    "/{department_id}/teams",
    response_model=Envelope[Team],
    dependencies=[Depends(require_department_admin)],
)
async def create_department_team(
    department_id: UUID,
    body: NameCreate,
    repo: OrgRepoDep,
) -> Envelope[Team]:
    """Create a team in the department."""
    with failure_on_error():
        team = await repo.create_department_team(department_id, body.name)
    return Envelope(data=team)


@router.get(
    "/{department_id}/users",
    response_model=Envelope[list[Member]],
    dependencies=[Depends(require_department_user)],
)
async def list_department_users(
    department_id: UUID,
    repo: OrgRepoDep,
    page: PaginationDep,
) -> Envelope[list[Member]]:
    """List department members."""
    with failure_on_error():
        members = await repo.list_department_users(department_id, page.limit, page.offset)
    return Envelope(data=members)


@router.post(
    "/{department_id}/users",
    response_model=Envelope[None],
    dependencies=[Depends(require_department_admin)],
)
async def add_department_user(
    department_id: UUID,
    body: MemberAdd,
    repo: OrgRepoDep,
    auth_repo: AuthRepoDep,
) -> Envelope[None]:
    """Add an organization member to the department by email."""
    member = await user_for_email(auth_repo, body.email)
    try:
        await repo.add_department_user(department_id, member.id, body.role)
    except ThunderdomeError as e:
        raise ApiFailure(status_for_error(e), e) from e
    logger.info(
        "Added user %s to department %s as %s", member.id, department_id, body.role.value
    )
    return Envelope()


@router.delete(
    "/{department_id}/users/{user_id}",
    response_model=Envelope[None],
    dependencies=[Depends(require_department_admin)],
)
async def remove_department_user(
    department_id: UUID,
    user_id: UUID,
    repo: OrgRepoDep,
) -> Envelope[None]:
    """Remove a user from the department and its teams."""
    with failure_on_error():
        await repo.remove_department_user(department_id, user_id)
    logger.info("Removed user %s from department %s", user_id, department_id)
    return Envelope()


@router.get(
    "/{department_id}/teams/{team_id}",
    response_model=Envelope[TeamDetail],
    dependencies=[Depends(require_team_user)],
)
async def get_department_team(
    request: Request,
    org_id: UUID,
    department_id: UUID,
    team_id: UUID,
    repo: OrgRepoDep,
) -> Envelope[TeamDetail]:
    """Get a department team with its parents and the caller's roles."""
    with failure_on_error():
        organization = await repo.get_organization(org_id)
        department = await repo.get_department(department_id)
        team = await repo.get_team(team_id)

    return Envelope(
        data=TeamDetail(
            organization=organization,
            department=department,
            team=team,
            organization_role=request.state.org_role,
            department_role=request.state.department_role,
            team_role=request.state.team_role,
        )
    )


@router.get(
    "/{department_id}/teams/{team_id}/users",
    response_model=Envelope[list[Member]],
    dependencies=[Depends(require_team_user)],
)
async def list_department_team_users(
    team_id: UUID,
    repo: OrgRepoDep,
    page: PaginationDep,
) -> Envelope[list[Member]]:
    """List team members."""
    with failure_on_error():
        members = await repo.list_team_users(team_id, page.limit, page.offset)
    return Envelope(data=members)


@router.post(
    "/{department_id}/teams/{team_id}/users",
    response_model=Envelope[None],
    dependencies=[Depends(require_team_admin)],
)
async def add_department_team_user(
    org_id: UUID,
    department_id: UUID,
    team_id: UUID,
    body: MemberAdd,
    repo: OrgRepoDep,
    auth_repo: AuthRepoDep,
) -> Envelope[None]:
    """Add a department member to the team by email.

    The user must already belong to the department.
    """
    member = await user_for_email(auth_repo, body.email)

    try:
        roles = await repo.get_department_roles(member.id, org_id, department_id)
    except ThunderdomeError as e:
        logger.warning("Department role lookup failed for user %s: %r", member.id, e)
        roles = None

    if roles is None or roles.department_role is None:
        raise ApiFailure(
            status.HTTP_401_UNAUTHORIZED,
            ThunderdomeError(EUNAUTHORIZED, "DEPARTMENT_USER_REQUIRED"),
        )

    with failure_on_error():
        await repo.add_team_user(team_id, member.id, body.role)
    logger.info("Added user %s to team %s as %s", member.id, team_id, body.role.value)
    return Envelope()


@router.delete(
    "/{department_id}/teams/{team_id}/users/{user_id}",
    response_model=Envelope[None],
    dependencies=[Depends(require_team_admin)],
)
async def remove_department_team_user(
    team_id: UUID,
    user_id: UUID,
    repo: OrgRepoDep,
) -> Envelope[None]:
    """Remove a user from the team."""
    with failure_on_error():
        await repo.remove_team_user(team_id, user_id)
    logger.info("Removed user %s from team %s", user_id, team_id)
    return Envelope()
