"""
AuthService against a real (SQLite) user store.
"""

import asyncio

import pytest
from unittest.mock import AsyncMock, patch
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from api.errors import (
    AuthenticationError,
    ConfigurationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from auth.jwt import TokenCodec
from auth.service import AuthService
from database import session as db
from database.models import User


def _service(secret="secret") -> AuthService:
    return AuthService(TokenCodec(secret), bcrypt_rounds=4)


async def _user_count() -> int:
    async with db.session_scope() as session:
        result = await session.execute(select(func.count()).select_from(User))
        return result.scalar_one()


@pytest.mark.usefixtures("database")
class TestSignup:
    @pytest.mark.asyncio
    async def test_token_subject_is_new_user(self):
        service = _service()
        result = await service.signup("user1", "u1@x.com", "secret1")

        assert service.tokens.verify(result.token) == result.userId
        assert result.username == "user1"
        assert result.email == "u1@x.com"

    @pytest.mark.asyncio
    async def test_password_stored_hashed(self):
        await _service().signup("user1", "u1@x.com", "secret1")

        async with db.session_scope() as session:
            user = (await session.execute(select(User))).scalar_one()
        assert user.password_hash != "secret1"
        assert user.password_hash.startswith("$2")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "username,email",
        [("user1", "other@x.com"), ("other", "u1@x.com"), ("user1", "u1@x.com")],
    )
    async def test_existing_identity_conflicts(self, username, email):
        service = _service()
        await service.signup("user1", "u1@x.com", "secret1")

        with pytest.raises(ConflictError) as exc_info:
            await service.signup(username, email, "a-different-password")
        assert exc_info.value.message == "User already exists"
        assert await _user_count() == 1

    @pytest.mark.asyncio
    async def test_unique_constraint_is_the_backstop(self):
        """A signup that slips past the lookup still ends in ConflictError."""
        service = _service()
        await service.signup("user1", "u1@x.com", "secret1")

        with patch("auth.service.find_user_by_identity", new=AsyncMock(return_value=None)):
            with pytest.raises(ConflictError):
                await service.signup("user2", "u1@x.com", "secret1")

        assert await _user_count() == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "username,email,password,message",
        [
            ("", "u1@x.com", "secret1", "All fields are required"),
            ("user1", None, "secret1", "All fields are required"),
            ("user1", "u1@x.com", "", "All fields are required"),
            ("user1", "not-an-email", "secret1", "Invalid email format"),
            ("user1", "u1@localhost", "secret1", "Invalid email format"),
            ("user1", "u1@x.com", "12345", "Password must be at least 6 characters long"),
        ],
    )
    async def test_invalid_input(self, username, email, password, message):
        with pytest.raises(ValidationError) as exc_info:
            await _service().signup(username, email, password)
        assert exc_info.value.message == message
        assert await _user_count() == 0

    @pytest.mark.asyncio
    async def test_missing_secret_fails_before_insert(self):
        with pytest.raises(ConfigurationError):
            await _service(secret=None).signup("user1", "u1@x.com", "secret1")
        assert await _user_count() == 0


class TestStoreUnavailable:
    @pytest.mark.asyncio
    async def test_signup_without_database(self):
        assert not db.is_connected()
        with pytest.raises(ConfigurationError) as exc_info:
            await _service().signup("user1", "u1@x.com", "secret1")
        assert exc_info.value.message == "Database connection error"

    @pytest.mark.asyncio
    async def test_login_without_database(self):
        with pytest.raises(ConfigurationError):
            await _service().login("u1@x.com", "secret1")


@pytest.mark.usefixtures("database")
class TestLogin:
    @pytest.mark.asyncio
    async def test_login_issues_fresh_token(self):
        service = _service()
        created = await service.signup("user1", "u1@x.com", "secret1")

        result = await service.login("u1@x.com", "secret1")
        assert result.userId == created.userId
        assert service.tokens.verify(result.token) == created.userId

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_fail_identically(self):
        service = _service()
        await service.signup("user1", "u1@x.com", "secret1")

        with pytest.raises(AuthenticationError) as wrong_password:
            await service.login("u1@x.com", "wrong")
        with pytest.raises(AuthenticationError) as unknown_email:
            await service.login("nobody@x.com", "secret1")

        assert wrong_password.value.message == unknown_email.value.message == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_missing_fields(self):
        with pytest.raises(ValidationError) as exc_info:
            await _service().login("u1@x.com", None)
        assert exc_info.value.message == "Email and password are required"


@pytest.mark.usefixtures("database")
class TestProfile:
    @pytest.mark.asyncio
    async def test_profile_omits_password(self):
        service = _service()
        created = await service.signup("user1", "u1@x.com", "secret1")

        profile = await service.profile(created.userId)
        assert profile["id"] == created.userId
        assert profile["username"] == "user1"
        assert not any("password" in key.lower() for key in profile)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("user_id", ["00000000-0000-0000-0000-000000000000", "not-a-uuid"])
    async def test_unknown_user(self, user_id):
        with pytest.raises(NotFoundError):
            await _service().profile(user_id)


@pytest.mark.usefixtures("database")
class TestPasswordEdgeCases:
    @pytest.mark.asyncio
    async def test_long_password_signs_up_and_logs_in(self):
        service = _service()
        password = "p" * 100
        created = await service.signup("user1", "u1@x.com", password)

        result = await service.login("u1@x.com", password)
        assert result.userId == created.userId

    @pytest.mark.asyncio
    async def test_blank_password_is_accepted(self):
        service = _service()
        created = await service.signup("user1", "u1@x.com", "      ")

        result = await service.login("u1@x.com", "      ")
        assert result.userId == created.userId
        with pytest.raises(AuthenticationError):
            await service.login("u1@x.com", "     x")


@pytest.mark.usefixtures("database")
class TestConcurrentSignup:
    @pytest.mark.asyncio
    async def test_same_email_stores_one_record(self):
        service = _service()
        results = await asyncio.gather(
            service.signup("user1", "u1@x.com", "secret1"),
            service.signup("user2", "u1@x.com", "secret2"),
            return_exceptions=True,
        )

        conflicts = [r for r in results if isinstance(r, ConflictError)]
        created = [r for r in results if not isinstance(r, Exception)]
        assert len(conflicts) >= 1
        assert len(created) + len(conflicts) == 2
        assert await _user_count() == 1


class TestStoreOutage:
    @pytest.mark.asyncio
    async def test_unreachable_store_after_startup(self, database, tmp_path):
        healthy_factory = db.async_session_factory
        broken_engine = create_async_engine(
            f"sqlite+aiosqlite:///{tmp_path / 'missing-dir' / 'users.db'}"
        )
        db.async_session_factory = async_sessionmaker(broken_engine, class_=AsyncSession, expire_on_commit=False)
        try:
            with pytest.raises(ConfigurationError) as signup_error:
                await _service().signup("user1", "u1@x.com", "secret1")
            with pytest.raises(ConfigurationError) as login_error:
                await _service().login("u1@x.com", "secret1")
        finally:
            db.async_session_factory = healthy_factory
            await broken_engine.dispose()

        assert signup_error.value.message == "Database connection error"
        assert login_error.value.message == "Database connection error"
