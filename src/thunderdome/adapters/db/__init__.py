"""Application database adapter."""

from thunderdome.adapters.db.app_db import AppDatabase, schema_statements
from thunderdome.adapters.db.errors import DATABASE_ERRORS, persistence_errors

__all__ = ["AppDatabase", "schema_statements", "DATABASE_ERRORS", "persistence_errors"]
