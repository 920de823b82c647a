"""
AI Code backend — application entry point.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.ai import router as ai_router
from api.comments import router as comments_router
from api.errors import register_exception_handlers
from api.messages import router as messages_router
from api.middleware import register_middleware
from api.projects import router as projects_router
from auth.jwt import TokenCodec
from auth.routes import router as auth_router
from auth.service import AuthService
from config.settings import Settings, config
from database.session import connect_database, disconnect_database, is_connected

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
        stream=sys.stdout,
    )
    for _noisy in ("httpcore", "httpx", "openai", "anthropic", "urllib3", "sqlalchemy.engine"):
        logging.getLogger(_noisy).setLevel(logging.WARNING)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or config

    app = FastAPI(
        title="AI Code Backend",
        version="1.0.0",
        description="Authentication, projects, comments, messages and AI code review.",
    )

    token_codec = TokenCodec.from_settings(settings)
    app.state.settings = settings
    app.state.token_codec = token_codec
    app.state.auth_service = AuthService(token_codec, bcrypt_rounds=settings.bcrypt_rounds)

    logger.info(
        "Environment check: environment=%s hasDatabaseUrl=%s hasJwtSecret=%s",
        settings.environment, bool(settings.database_url), bool(settings.jwt_secret),
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "Accept"],
        max_age=86400,
    )

    register_middleware(app)
    register_exception_handlers(app, expose_details=settings.is_development)

    # Routes
    app.include_router(ai_router, prefix="/ai")
    app.include_router(auth_router, prefix="/api/auth")
    app.include_router(projects_router, prefix="/api/projects")
    app.include_router(comments_router, prefix="/api/comments")
    app.include_router(messages_router, prefix="/api/messages")

    @app.get("/")
    async def welcome():
        return {
            "success": True,
            "message": "Backend API is successfully deployed and running!",
            "status": "active",
        }

    @app.get("/health")
    async def health():
        return {
            "status": "ok",
            "database": "connected" if is_connected() else "disconnected",
            "env": {
                "environment": settings.environment,
                "hasDatabaseUrl": bool(settings.database_url),
                "hasJwtSecret": bool(settings.jwt_secret),
            },
        }

    @app.on_event("startup")
    async def on_startup():
        if not settings.jwt_secret:
            logger.error("JWT_SECRET is not defined; auth endpoints will fail")
        await connect_database(settings)
        logger.info("Application ready to accept requests.")

    @app.on_event("shutdown")
    async def on_shutdown():
        await disconnect_database()

    return app


configure_logging(config)
app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
