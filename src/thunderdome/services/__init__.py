"""Application services."""

from thunderdome.services.apikeys import ApiKeyService

__all__ = ["ApiKeyService"]
