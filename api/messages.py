"""
Project message routes.  Only the project owner can read or post, and the
sender is always the authenticated caller.

Route prefix: /api/messages
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import db_session, get_current_user_id
from api.errors import NotFoundError
from database.helpers import add_message, get_project, list_messages
from utils.validators import require_fields

router = APIRouter(tags=["messages"])


class MessageCreate(BaseModel):
    projectId: Optional[str] = None
    content: Optional[str] = None


@router.get("/{project_id}")
async def get_messages(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    project = await get_project(session, project_id, owner_id=user_id)
    if project is None:
        raise NotFoundError("Project not found")
    messages = await list_messages(session, project.project_id)
    return {"success": True, "messages": [m.to_dict() for m in messages]}


@router.post("/", status_code=status.HTTP_201_CREATED)
async def post_message(
    req: MessageCreate,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    require_fields("projectId and content are required", req.projectId, req.content)

    project = await get_project(session, req.projectId, owner_id=user_id)
    if project is None:
        raise NotFoundError("Project not found")

    message = await add_message(session, project.project_id, user_id, req.content)
    await session.commit()
    return {"success": True, "message": message.to_dict()}
