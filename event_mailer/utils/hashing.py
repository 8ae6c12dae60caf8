"""Hashing helpers for identifiers that should not appear verbatim in headers."""

import hashlib


def hash_string(value: str) -> str:
    """SHA256 hex digest of a string (64 characters)."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def short_digest(value: str, length: int = 16) -> str:
    """Leading ``length`` hex characters of the SHA256 of a normalized value.

    Case and surrounding whitespace are ignored, so the same address always
    maps to the same digest.

    Example:
        >>> short_digest("Ada@Example.com") == short_digest(" ada@example.com ")
        True
    """
    return hash_string(value.strip().lower())[:length]
