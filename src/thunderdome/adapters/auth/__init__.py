"""Auth adapters."""

from thunderdome.adapters.auth.postgres import PostgresAuthRepository

__all__ = ["PostgresAuthRepository"]
