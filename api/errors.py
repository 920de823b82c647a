"""
Application error taxonomy and the single error → JSON envelope mapping.

Every handler raises one of the ``AppError`` subclasses below; the exception
handlers registered by ``register_exception_handlers`` turn them into
``{"success": false, "message": ...}`` responses.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors surfaced to API clients."""

    status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
    default_message: str = "Something went wrong!"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status = HTTPStatus.BAD_REQUEST
    default_message = "Invalid request"


class ConflictError(AppError):
    status = HTTPStatus.BAD_REQUEST
    default_message = "User already exists"


class AuthenticationError(AppError):
    status = HTTPStatus.UNAUTHORIZED
    default_message = "Authentication required"


class InvalidTokenError(AuthenticationError):
    default_message = "Invalid or expired token"


class NotFoundError(AppError):
    status = HTTPStatus.NOT_FOUND
    default_message = "Not found"


class ConfigurationError(AppError):
    status = HTTPStatus.INTERNAL_SERVER_ERROR
    default_message = "Server configuration error"


class UpstreamError(AppError):
    status = HTTPStatus.BAD_GATEWAY
    default_message = "Upstream service error"


def error_response(
    status: int,
    message: str,
    detail: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    """Build the uniform error envelope."""
    body: Dict[str, Any] = {"success": False, "message": message}
    if detail is not None:
        body["error"] = detail
    return JSONResponse(status_code=int(status), content=body)


def register_exception_handlers(app: FastAPI, *, expose_details: bool = False) -> None:
    """Route every failure through ``error_response``."""

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
        if exc.status >= HTTPStatus.INTERNAL_SERVER_ERROR:
            logger.error("%s %s — %s: %s", request.method, request.url.path, type(exc).__name__, exc.message)
        else:
            logger.info("%s %s — %s: %s", request.method, request.url.path, type(exc).__name__, exc.message)
        return error_response(exc.status, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "Invalid request body")
        if location:
            message = f"{location}: {message}"
        return error_response(HTTPStatus.BAD_REQUEST, message)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        detail = None
        if expose_details:
            detail = {"name": type(exc).__name__, "message": str(exc)}
        return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, "Something went wrong!", detail)
