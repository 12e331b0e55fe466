"""API middleware: authentication, feature flags and role resolution."""

from thunderdome.entrypoints.api.middleware.auth import (
    API_KEY_HEADER,
    AuthUser,
    require_self,
    verify_api_key,
)
from thunderdome.entrypoints.api.middleware.features import require_organizations_enabled
from thunderdome.entrypoints.api.middleware.roles import (
    require_department_admin,
    require_department_user,
    require_org_admin,
    require_org_user,
    require_team_admin,
    require_team_user,
)

__all__ = [
    "API_KEY_HEADER",
    "AuthUser",
    "require_self",
    "verify_api_key",
    "require_organizations_enabled",
    "require_org_user",
    "require_org_admin",
    "require_department_user",
    "require_department_admin",
    "require_team_user",
    "require_team_admin",
]
