"""Organization routes.

All routes are gated by the organizations feature flag. Organization roles
are resolved by the role dependencies and read back from ``request.state``.
"""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from thunderdome.core.org.types import Member, MemberRole, Organization, Team, UserOrganization
from thunderdome.entrypoints.api.deps import AuthRepoDep, OrgRepoDep, PaginationDep
from thunderdome.entrypoints.api.middleware.auth import AuthUser
from thunderdome.entrypoints.api.middleware.features import require_organizations_enabled
from thunderdome.entrypoints.api.middleware.roles import require_org_admin, require_org_user
from thunderdome.entrypoints.api.responses import Envelope, failure_on_error
from thunderdome.entrypoints.api.routes.members import MemberAdd, NameCreate, user_for_email

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/organizations",
    tags=["organizations"],
    dependencies=[Depends(require_organizations_enabled)],
)


class OrganizationDetail(BaseModel):
    """An organization with the caller's role in it."""

    organization: Organization
    role: MemberRole


@router.get("", response_model=Envelope[list[UserOrganization]])
async def list_organizations(
    user: AuthUser,
    repo: OrgRepoDep,
    page: PaginationDep,
) -> Envelope[list[UserOrganization]]:
    """List organizations the caller belongs to."""
    with failure_on_error():
        organizations = await repo.list_user_organizations(user.id, page.limit, page.offset)
    return Envelope(data=organizations)


@router.post("", response_model=Envelope[Organization])
async def create_organization(
    body: NameCreate,
    user: AuthUser,
    repo: OrgRepoDep,
) -> Envelope[Organization]:
    """Create an organization with the caller as its admin."""
    with failure_on_error():
        organization = await repo.create_organization(user.id, body.name)
    return Envelope(data=organization)


@router.get(
    "/{org_id}",
    response_model=Envelope[OrganizationDetail],
    dependencies=[Depends(require_org_user)],
)
async def get_organization(
    request: Request,
    org_id: UUID,
    repo: OrgRepoDep,
) -> Envelope[OrganizationDetail]:
    """Get an organization and the caller's role in it."""
    with failure_on_error():
        organization = await repo.get_organization(org_id)
    return Envelope(
        data=OrganizationDetail(organization=organization, role=request.state.org_role)
    )


@router.get(
    "/{org_id}/users",
    response_model=Envelope[list[Member]],
    dependencies=[Depends(require_org_user)],
)
async def list_organization_users(
    org_id: UUID,
    repo: OrgRepoDep,
    page: PaginationDep,
) -> Envelope[list[Member]]:
    """List organization members."""
    with failure_on_error():
        members = await repo.list_organization_users(org_id, page.limit, page.offset)
    return Envelope(data=members)


@router.post(
    "/{org_id}/users",
    response_model=Envelope[None],
    dependencies=[Depends(require_org_admin)],
)
async def add_organization_user(
    org_id: UUID,
    body: MemberAdd,
    repo: OrgRepoDep,
    auth_repo: AuthRepoDep,
) -> Envelope[None]:
    """Add a user to the organization by email."""
    member = await user_for_email(auth_repo, body.email)
    with failure_on_error():
        await repo.add_organization_user(org_id, member.id, body.role)
    logger.info("Added user %s to organization %s as %s", member.id, org_id, body.role.value)
    return Envelope()


@router.delete(
    "/{org_id}/users/{user_id}",
    response_model=Envelope[None],
    dependencies=[Depends(require_org_admin)],
)
async def remove_organization_user(
    org_id: UUID,
    user_id: UUID,
    repo: OrgRepoDep,
) -> Envelope[None]:
    """Remove a user from the organization and all of its departments and teams."""
    with failure_on_error():
        await repo.remove_organization_user(org_id, user_id)
    logger.info("Removed user %s from organization %s", user_id, org_id)
    return Envelope()


@router.get(
    "/{org_id}/teams",
    response_model=Envelope[list[Team]],
    dependencies=[Depends(require_org_user)],
)
async def list_organization_teams(
    org_id: UUID,
    repo: OrgRepoDep,
    page: PaginationDep,
) -> Envelope[list[Team]]:
    """List teams owned directly by the organization."""
    with failure_on_error():
        teams = await repo.list_organization_teams(org_id, page.limit, page.offset)
    return Envelope(data=teams)


@router.post(
    "/{org_id}/teams",
    response_model=Envelope[Team],
    dependencies=[Depends(require_org_admin)],
)
async def create_organization_team(
    org_id: UUID,
    body: NameCreate,
    repo: OrgRepoDep,
) -> Envelope[Team]:
    """Create a team owned directly by the organization."""
    with failure_on_error():
        team = await repo.create_organization_team(org_id, body.name)
    return Envelope(data=team)
