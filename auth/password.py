"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic
salting and configurable work factor.  bcrypt only reads the first 72 bytes
of a password; longer inputs are truncated to that before hashing and
checking.
"""

from __future__ import annotations

import bcrypt

DEFAULT_ROUNDS = 10
MAX_PASSWORD_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode()[:MAX_PASSWORD_BYTES]


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password with bcrypt (fresh random salt on every call)."""
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison against a bcrypt hash."""
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode())
    except (ValueError, TypeError):
        return False
