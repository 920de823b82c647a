"""
Async SQLAlchemy engine / session management.

The engine is created once at startup by ``connect_database``.  When the
database URL is missing or the first connection fails the module stays in a
*disconnected* state: the process keeps serving and every request that needs a
session gets a ``ConfigurationError`` instead.
"""

from __future__ import annotations

import logging
import re
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator, Optional

from sqlalchemy import text
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from api.errors import ConfigurationError
from config.settings import Settings
from database.models import Base

logger = logging.getLogger(__name__)

engine: Optional[AsyncEngine] = None
async_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def _redact(url: str) -> str:
    return re.sub(r"//[^:/@]+:[^@]+@", "//<credentials>@", url)


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"echo": False}
    return {
        "echo": False,
        "pool_size": 10,
        "max_overflow": 20,
        "pool_recycle": 3600,
        "pool_pre_ping": True,
    }


async def connect_database(settings: Settings) -> bool:
    """
    Create the engine, verify connectivity and create missing tables.

    Returns ``True`` on success.  On failure the error is logged and, in the
    development environment only, re-raised so startup aborts.
    """
    global engine, async_session_factory

    try:
        if not settings.database_url:
            raise RuntimeError("DATABASE_URL is not defined in environment variables")

        logger.info("Connecting to database %s", _redact(settings.database_url))
        new_engine = create_async_engine(settings.database_url, **_engine_kwargs(settings.database_url))
        async with new_engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            await conn.run_sync(Base.metadata.create_all)
    except Exception:
        logger.exception("Database connection failed")
        if settings.is_development:
            raise
        return False

    engine = new_engine
    async_session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    logger.info("Database connected")
    return True


async def disconnect_database() -> None:
    global engine, async_session_factory

    if engine is not None:
        await engine.dispose()
    engine = None
    async_session_factory = None


def is_connected() -> bool:
    return async_session_factory is not None


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """Open a session, committing on success and rolling back on error."""
    if async_session_factory is None:
        logger.error("Database session requested while disconnected")
        raise ConfigurationError("Database connection error")

    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except (OperationalError, InterfaceError) as exc:
            await session.rollback()
            logger.error("Database unreachable: %s", exc)
            raise ConfigurationError("Database connection error") from exc
        except Exception:
            await session.rollback()
            raise


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency function — use in FastAPI `Depends(get_db_session)`."""
    async with session_scope() as session:
        yield session
