"""Request / response schemas for the auth routes, plus the ``User`` model re-export.

Request fields are optional at the schema level so missing values reach the
service and come back as the usual 400 envelope rather than a framework 422.
"""

from typing import Optional

from pydantic import BaseModel

from database.models import User  # noqa: F401

__all__ = ["User", "SignupRequest", "LoginRequest", "AuthResponse"]


class SignupRequest(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class AuthResponse(BaseModel):
    success: bool = True
    token: str
    userId: str
    username: str
    email: str
