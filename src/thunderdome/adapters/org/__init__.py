"""Organization hierarchy adapters."""

from thunderdome.adapters.org.postgres import PostgresOrganizationRepository

__all__ = ["PostgresOrganizationRepository"]
