"""Password hashing primitives."""

from __future__ import annotations

import hashlib

import bcrypt


def _bcrypt_input(password: str) -> bytes:
    # bcrypt only reads the first 72 bytes; longer secrets are pre-hashed.
    raw = password.encode("utf-8")
    if len(raw) <= 72:
        return raw
    return hashlib.sha256(raw).hexdigest().encode("ascii")


def hash_password(password: str, rounds: int = 12) -> str:
    """Return a salted bcrypt hash for storage."""
    return bcrypt.hashpw(_bcrypt_input(password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, hashed_password: str | None) -> bool:
    """Constant-time comparison against a stored bcrypt hash."""
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(_bcrypt_input(password), hashed_password.encode("utf-8"))
    except ValueError:
        return False
