"""
Project CRUD routes.  Every project belongs to the user who created it and is
only visible to that user.

Route prefix: /api/projects
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import db_session, get_current_user_id
from api.errors import NotFoundError, ValidationError
from database.helpers import (
    create_project,
    delete_project,
    get_project,
    list_projects,
    update_project,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["projects"])


class ProjectCreate(BaseModel):
    name: Optional[str] = None
    description: str = ""
    language: str = "javascript"
    code: str = ""


class ProjectUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    language: Optional[str] = None
    code: Optional[str] = None


@router.get("/")
async def get_projects(
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    projects = await list_projects(session, user_id)
    return {"success": True, "projects": [p.to_dict() for p in projects]}


@router.post("/", status_code=status.HTTP_201_CREATED)
async def post_project(
    req: ProjectCreate,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    if not req.name or not req.name.strip():
        raise ValidationError("Project name is required")

    project = await create_project(session, user_id, req.model_dump())
    await session.commit()
    logger.info("Created project %s for user %s", project.project_id, user_id)
    return {"success": True, "project": project.to_dict()}


@router.get("/{project_id}")
async def get_one_project(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    project = await get_project(session, project_id, owner_id=user_id)
    if project is None:
        raise NotFoundError("Project not found")
    return {"success": True, "project": project.to_dict()}


@router.put("/{project_id}")
async def put_project(
    project_id: str,
    req: ProjectUpdate,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    project = await get_project(session, project_id, owner_id=user_id)
    if project is None:
        raise NotFoundError("Project not found")

    fields = req.model_dump(exclude_none=True)
    if "name" in fields and not fields["name"].strip():
        raise ValidationError("Project name is required")

    project = await update_project(session, project, fields)
    await session.commit()
    return {"success": True, "project": project.to_dict()}


@router.delete("/{project_id}")
async def remove_project(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    project = await get_project(session, project_id, owner_id=user_id)
    if project is None:
        raise NotFoundError("Project not found")
    await delete_project(session, project)
    await session.commit()
    return {"success": True}
