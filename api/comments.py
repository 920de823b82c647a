"""
Project comment routes.

Route prefix: /api/comments
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import db_session
from api.errors import NotFoundError
from database.helpers import add_comment, delete_comment, get_project, list_comments
from utils.validators import require_fields

logger = logging.getLogger(__name__)

router = APIRouter(tags=["comments"])


class CommentCreate(BaseModel):
    projectId: Optional[str] = None
    user: Optional[str] = None
    text: Optional[str] = None


@router.get("/{project_id}")
async def get_comments(
    project_id: str,
    session: AsyncSession = Depends(db_session),
) -> List[Dict[str, Any]]:
    """Comments of a project, oldest first."""
    return [c.to_dict() for c in await list_comments(session, project_id)]


@router.post("/")
async def post_comment(
    req: CommentCreate,
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    require_fields("projectId, user and text are required", req.projectId, req.user, req.text)

    project = await get_project(session, req.projectId)
    if project is None:
        raise NotFoundError("Project not found")

    comment = await add_comment(session, project.project_id, req.user, req.text)
    await session.commit()
    return comment.to_dict()


@router.delete("/{comment_id}")
async def remove_comment(
    comment_id: str,
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    if not await delete_comment(session, comment_id):
        raise NotFoundError("Comment not found")
    await session.commit()
    return {"success": True}
