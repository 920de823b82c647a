"""
JWT-style token creation and verification.

Tokens are base64-encoded JSON payloads signed with HMAC-SHA256::

    base64({"user_id": ..., "iat": ..., "exp": ...}) + "." + hex(hmac)

The secret comes from ``Settings.jwt_secret`` (env var: ``JWT_SECRET``).
Verification needs nothing but the token, the secret and the clock.
"""

from __future__ import annotations

import binascii
import hashlib
import hmac
import json
import time
from base64 import b64decode, b64encode
from typing import Callable, Optional

from api.errors import ConfigurationError, InvalidTokenError
from config.settings import Settings


class TokenCodec:
    """Issues and verifies signed, self-contained session tokens."""

    def __init__(
        self,
        secret: Optional[str],
        expiry_seconds: int = 86400,
        now: Callable[[], float] = time.time,
    ) -> None:
        self._secret = secret.encode() if secret else None
        self.expiry_seconds = expiry_seconds
        self._now = now

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenCodec":
        return cls(settings.jwt_secret, settings.jwt_expiry_seconds)

    @property
    def configured(self) -> bool:
        return self._secret is not None

    def ensure_configured(self) -> None:
        if self._secret is None:
            raise ConfigurationError("Server configuration error")

    def _sign(self, raw: bytes) -> str:
        self.ensure_configured()
        return hmac.new(self._secret, raw, hashlib.sha256).hexdigest()

    def issue(self, user_id: str) -> str:
        """Create a signed token containing ``user_id``, issue time and expiry."""
        issued_at = int(self._now())
        payload = {
            "user_id": user_id,
            "iat": issued_at,
            "exp": issued_at + self.expiry_seconds,
        }
        raw = json.dumps(payload).encode()
        return b64encode(raw).decode() + "." + self._sign(raw)

    def verify(self, token: str) -> str:
        """
        Verify token and return ``user_id``.

        Raises ``InvalidTokenError`` on malformed, tampered or expired tokens.
        """
        self.ensure_configured()

        parts = token.split(".", 1)
        if len(parts) != 2:
            raise InvalidTokenError()
        try:
            raw = b64decode(parts[0], validate=True)
        except (binascii.Error, ValueError):
            raise InvalidTokenError()

        if not hmac.compare_digest(parts[1].encode(), self._sign(raw).encode()):
            raise InvalidTokenError()

        try:
            payload = json.loads(raw)
        except ValueError:
            raise InvalidTokenError()
        if not isinstance(payload, dict):
            raise InvalidTokenError()

        user_id = payload.get("user_id")
        exp = payload.get("exp")
        if not isinstance(user_id, str) or not isinstance(exp, (int, float)):
            raise InvalidTokenError()
        if exp <= self._now():
            raise InvalidTokenError()
        return user_id
