"""
Auth API routes — signup, login, profile.

Route prefix: /api/auth
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from auth.dependencies import get_auth_service, get_current_user_id
from auth.models import AuthResponse, LoginRequest, SignupRequest
from auth.service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    req: SignupRequest,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Register a new user."""
    return await service.signup(req.username, req.email, req.password)


@router.post("/login", response_model=AuthResponse)
async def login(
    req: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Login with email + password."""
    return await service.login(req.email, req.password)


@router.get("/user/profile")
async def profile(
    user_id: str = Depends(get_current_user_id),
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Return the authenticated user's record without the password hash."""
    return {"success": True, "user": await service.profile(user_id)}
