"""API key generation and hashing.

A presented API key looks like ``<prefix>.<secret>``. The prefix is public
and used as a lookup index; the server only ever stores
``<prefix>.<sha256 of the full presented key>``.
"""

import hashlib
import secrets

KEY_PREFIX_LENGTH = 8
KEY_SECRET_LENGTH = 32
KEY_SEPARATOR = "."


def random_string(length: int) -> str:
    """Generate a cryptographically secure random string.

    The alphabet is URL-safe base64 (``A-Z a-z 0-9 - _``), so the result
    never contains the key separator.

    Args:
        length: Number of characters to return.

    Returns:
        Random string of exactly ``length`` characters.
    """
    if length <= 0:
        raise ValueError("length must be positive")
    # token_urlsafe(n) yields roughly 1.3 * n characters
    return secrets.token_urlsafe(length)[:length]


def hash_key(key: str) -> str:
    """Hash a presented API key for storage and lookup.

    Args:
        key: The full presented key, prefix included.

    Returns:
        Hex-encoded SHA-256 hash of the key.
    """
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


def generate_key() -> tuple[str, str]:
    """Generate a new API key.

    Returns:
        Tuple of (prefix, presented key).
    """
    prefix = random_string(KEY_PREFIX_LENGTH)
    secret = random_string(KEY_SECRET_LENGTH)
    return prefix, f"{prefix}{KEY_SEPARATOR}{secret}"


def split_key(key: str) -> tuple[str, str] | None:
    """Split a presented key into prefix and secret.

    Returns:
        Tuple of (prefix, secret), or None when the key is malformed.
    """
    prefix, sep, secret = key.partition(KEY_SEPARATOR)
    if not sep or not prefix or not secret:
        return None
    return prefix, secret


def key_id_for(key: str) -> str | None:
    """Compute the stored identifier for a presented key.

    Returns:
        ``<prefix>.<hash>``, or None when the key is malformed.
    """
    parts = split_key(key)
    if parts is None:
        return None
    return f"{parts[0]}{KEY_SEPARATOR}{hash_key(key)}"


def prefix_from_id(key_id: str) -> str:
    """Extract the public prefix from a stored key identifier."""
    return key_id.split(KEY_SEPARATOR, 1)[0]
