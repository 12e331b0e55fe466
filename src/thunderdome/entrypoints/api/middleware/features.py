"""Feature flag dependencies for API routes."""

from fastapi import status

from thunderdome.core.exceptions import EINVALID, ThunderdomeError
from thunderdome.entrypoints.api.deps import SettingsDep
from thunderdome.entrypoints.api.responses import ApiFailure


async def require_organizations_enabled(app_settings: SettingsDep) -> None:
    """Reject the request when the organizations feature is disabled.

    Usage:
        router = APIRouter(dependencies=[Depends(require_organizations_enabled)])

    Declared at router level it runs before authentication and body parsing,
    so a disabled feature wins over every other input error.
    """
    if not app_settings.organizations_enabled:
        raise ApiFailure(
            status.HTTP_400_BAD_REQUEST,
            ThunderdomeError(EINVALID, "ORGANIZATIONS_DISABLED"),
        )
