"""Auth domain types and utilities."""

from thunderdome.core.auth.keys import (
    generate_key,
    hash_key,
    key_id_for,
    prefix_from_id,
    random_string,
    split_key,
)
from thunderdome.core.auth.repository import AuthRepository
from thunderdome.core.auth.types import APIKey, User, UserType, gravatar_hash

__all__ = [
    "APIKey",
    "User",
    "UserType",
    "gravatar_hash",
    "generate_key",
    "hash_key",
    "key_id_for",
    "prefix_from_id",
    "random_string",
    "split_key",
    "AuthRepository",
]
