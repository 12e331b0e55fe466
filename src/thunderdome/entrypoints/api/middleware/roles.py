"""Organization, department and team role dependencies.

Each dependency resolves the caller's roles along the hierarchy, rejects
callers without access, and stores the roles on ``request.state``
(``org_role``, ``department_role``, ``team_role``) for the handlers.

Role hierarchy: an organization ADMIN can act on every department and
team in the organization; a department ADMIN on every team in the
department.
"""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends, Request, status

from thunderdome.core.exceptions import EUNAUTHORIZED, ThunderdomeError
from thunderdome.core.org.types import DepartmentRoles, MemberRole, TeamRoles
from thunderdome.entrypoints.api.deps import OrgRepoDep
from thunderdome.entrypoints.api.middleware.auth import AuthUser
from thunderdome.entrypoints.api.responses import ApiFailure, failure_on_error

logger = structlog.get_logger()


def _unauthorized(message: str) -> ApiFailure:
    return ApiFailure(status.HTTP_401_UNAUTHORIZED, ThunderdomeError(EUNAUTHORIZED, message))


def _forbidden(message: str) -> ApiFailure:
    return ApiFailure(status.HTTP_403_FORBIDDEN, ThunderdomeError(EUNAUTHORIZED, message))


async def require_org_user(
    request: Request,
    org_id: UUID,
    user: AuthUser,
    repo: OrgRepoDep,
) -> MemberRole:
    """Require the caller to be a member of the organization."""
    with failure_on_error():
        role = await repo.get_organization_role(user.id, org_id)

    if role is None:
        logger.info("organization_access_denied", user_id=str(user.id), org_id=str(org_id))
        raise _unauthorized("ORGANIZATION_USER_REQUIRED")

    request.state.org_role = role
    return role


async def require_org_admin(
    role: Annotated[MemberRole, Depends(require_org_user)],
) -> MemberRole:
    """Require the caller to be an organization admin."""
    if role != MemberRole.ADMIN:
        raise _forbidden("ORGANIZATION_ADMIN_REQUIRED")
    return role


async def require_department_user(
    request: Request,
    org_id: UUID,
    department_id: UUID,
    user: AuthUser,
    repo: OrgRepoDep,
) -> DepartmentRoles:
    """Require the caller to be an organization admin or a department member."""
    with failure_on_error():
        roles = await repo.get_department_roles(user.id, org_id, department_id)

    if roles.organization_role != MemberRole.ADMIN and roles.department_role is None:
        logger.info(
            "department_access_denied",
            user_id=str(user.id),
            department_id=str(department_id),
        )
        raise _unauthorized("DEPARTMENT_USER_REQUIRED")

    request.state.org_role = roles.organization_role
    request.state.department_role = roles.department_role
    return roles


async def require_department_admin(
    roles: Annotated[DepartmentRoles, Depends(require_department_user)],
) -> DepartmentRoles:
    """Require the caller to be an organization or department admin."""
    if MemberRole.ADMIN not in (roles.organization_role, roles.department_role):
        raise _forbidden("DEPARTMENT_ADMIN_REQUIRED")
    return roles


async def require_team_user(
    request: Request,
    org_id: UUID,
    department_id: UUID,
    team_id: UUID,
    user: AuthUser,
    repo: OrgRepoDep,
) -> TeamRoles:
    """Require the caller to be a parent admin or a team member."""
    with failure_on_error():
        roles = await repo.get_team_roles(user.id, org_id, department_id, team_id)

    parent_admin = MemberRole.ADMIN in (roles.organization_role, roles.department_role)
    if not parent_admin and roles.team_role is None:
        logger.info("team_access_denied", user_id=str(user.id), team_id=str(team_id))
        raise _unauthorized("TEAM_USER_REQUIRED")

    request.state.org_role = roles.organization_role
    request.state.department_role = roles.department_role
    request.state.team_role = roles.team_role
    return roles


async def require_team_admin(
    roles: Annotated[TeamRoles, Depends(require_team_user)],
) -> TeamRoles:
    """Require the caller to be an admin at the organization, department or team."""
    if MemberRole.ADMIN not in (roles.organization_role, roles.department_role, roles.team_role):
        raise _forbidden("TEAM_ADMIN_REQUIRED")
    return roles
