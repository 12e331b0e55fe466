"""API route modules."""

from fastapi import APIRouter

from thunderdome.entrypoints.api.routes.apikeys import router as apikeys_router
from thunderdome.entrypoints.api.routes.departments import router as departments_router
from thunderdome.entrypoints.api.routes.organizations import router as organizations_router

# Create main API router
api_router = APIRouter()

# Include all route modules
api_router.include_router(apikeys_router)
api_router.include_router(organizations_router)
api_router.include_router(departments_router)

__all__ = ["api_router"]
