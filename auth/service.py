"""
Signup / login / profile orchestration.

``AuthService`` ties together the credential store (``database.helpers``),
the bcrypt hasher and the token codec.  Settings and the codec are passed in
once at construction; nothing here reads global configuration.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncContextManager, Callable, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from api.errors import AuthenticationError, ConflictError, NotFoundError
from auth.jwt import TokenCodec
from auth.models import AuthResponse
from auth.password import DEFAULT_ROUNDS, hash_password, verify_password
from database.helpers import (
    find_user_by_email,
    find_user_by_identity,
    get_user,
    insert_user,
)
from database.session import session_scope
from utils.validators import require_fields, require_present, validate_signup_fields

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"

SessionScope = Callable[[], AsyncContextManager[AsyncSession]]


class AuthService:
    def __init__(
        self,
        tokens: TokenCodec,
        *,
        bcrypt_rounds: int = DEFAULT_ROUNDS,
        session_factory: Optional[SessionScope] = None,
    ) -> None:
        self.tokens = tokens
        self.bcrypt_rounds = bcrypt_rounds
        self._session_scope = session_factory or session_scope

    async def signup(
        self,
        username: Optional[str],
        email: Optional[str],
        password: Optional[str],
    ) -> AuthResponse:
        """
        Create a user and return a fresh token for it.

        The pre-insert lookup is only a fast path: two concurrent signups can
        both pass it, so the unique indexes on ``users`` decide the winner and
        an ``IntegrityError`` is reported as the same ``ConflictError``.
        """
        validate_signup_fields(username, email, password)
        self.tokens.ensure_configured()

        async with self._session_scope() as session:
            if await find_user_by_identity(session, email, username) is not None:
                logger.info("Signup rejected: identity already registered")
                raise ConflictError("User already exists")

            password_hash = await asyncio.to_thread(hash_password, password, self.bcrypt_rounds)
            try:
                user = await insert_user(session, username, email, password_hash)
            except IntegrityError:
                await session.rollback()
                logger.info("Signup rejected by unique constraint")
                raise ConflictError("User already exists")

        user_id = str(user.user_id)
        logger.info("Registered user %s (%s)", user.username, user_id)
        return AuthResponse(
            token=self.tokens.issue(user_id),
            userId=user_id,
            username=user.username,
            email=user.email,
        )

    async def login(self, email: Optional[str], password: Optional[str]) -> AuthResponse:
        """Check credentials; unknown email and wrong password fail identically."""
        require_fields("Email and password are required", email)
        require_present("Email and password are required", password)
        self.tokens.ensure_configured()

        async with self._session_scope() as session:
            user = await find_user_by_email(session, email)

        if user is None:
            raise AuthenticationError(INVALID_CREDENTIALS)
        if not await asyncio.to_thread(verify_password, password, user.password_hash):
            raise AuthenticationError(INVALID_CREDENTIALS)

        user_id = str(user.user_id)
        logger.info("Login: %s (%s)", user.username, user_id)
        return AuthResponse(
            token=self.tokens.issue(user_id),
            userId=user_id,
            username=user.username,
            email=user.email,
        )

    async def profile(self, user_id: str) -> Dict[str, Any]:
        async with self._session_scope() as session:
            user = await get_user(session, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user.to_public_dict()
