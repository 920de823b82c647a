"""
Shared fixtures: a temporary SQLite database and an in-process HTTP client.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from config.settings import Settings
from database import session as db
from main import create_app

TEST_SECRET = "test-jwt-secret"


def make_settings(tmp_path, **overrides) -> Settings:
    values = {
        "jwt_secret": TEST_SECRET,
        "database_url": f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        "bcrypt_rounds": 4,
        "environment": "test",
        "openai_api_key": "sk-test",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest_asyncio.fixture
async def database(settings):
    connected = await db.connect_database(settings)
    assert connected
    yield
    await db.disconnect_database()


@pytest_asyncio.fixture
async def app(settings, database):
    return create_app(settings)


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


async def signup(client, username="user1", email="u1@x.com", password="secret1"):
    return await client.post(
        "/api/auth/signup",
        json={"username": username, "email": email, "password": password},
    )


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
