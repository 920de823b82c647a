"""
FastAPI dependencies for authentication.

Provides ``get_auth_service``, ``get_token_codec`` and ``get_current_user_id``;
the last one guards every protected route.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.errors import AuthenticationError
from auth.jwt import TokenCodec
from auth.service import AuthService

_bearer_scheme = HTTPBearer(auto_error=False)


def get_token_codec(request: Request) -> TokenCodec:
    return request.app.state.token_codec


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    tokens: TokenCodec = Depends(get_token_codec),
) -> str:
    """
    Extract and verify the Bearer token, returning the authenticated
    ``user_id`` (UUID string).
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Authentication required")

    return tokens.verify(credentials.credentials)
