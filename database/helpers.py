"""
Database helper functions — lookups and inserts used by the route handlers.

"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Comment, Message, Project, User

logger = logging.getLogger(__name__)



def to_uuid(value: str | uuid.UUID) -> Optional[uuid.UUID]:
    """Parse an identifier; ``None`` when it is not a valid UUID."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (ValueError, TypeError):
        return None


# ── Users ────────────────────────────────────────────────────────────


async def find_user_by_identity(
    session: AsyncSession,
    email: str,
    username: str,
) -> Optional[User]:
    """Return any user whose email OR username matches."""
    result = await session.execute(
        select(User).where(or_(User.email == email, User.username == username)).limit(1)
    )
    return result.scalar_one_or_none()


async def find_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user(session: AsyncSession, user_id: str | uuid.UUID) -> Optional[User]:
    uid = to_uuid(user_id)
    if uid is None:
        return None
    return await session.get(User, uid)


async def insert_user(
    session: AsyncSession,
    username: str,
    email: str,
    password_hash: str,
) -> User:
    """
    Insert and commit a new user.

    Raises ``sqlalchemy.exc.IntegrityError`` when the unique email / username
    indexes reject the row.
    """
    user = User(
        user_id=uuid.uuid4(),
        username=username,
        email=email,
        password_hash=password_hash,
    )
    session.add(user)
    await session.flush()
    await session.commit()
    return user


# ── Projects ─────────────────────────────────────────────────────────


async def list_projects(session: AsyncSession, owner_id: str) -> List[Project]:
    result = await session.execute(
        select(Project)
        .where(Project.owner_id == to_uuid(owner_id))
        .order_by(Project.created_at.desc())
    )
    return list(result.scalars().all())


async def get_project(
    session: AsyncSession,
    project_id: str,
    owner_id: Optional[str] = None,
) -> Optional[Project]:
    """Fetch a project, optionally restricted to its owner."""
    pid = to_uuid(project_id)
    if pid is None:
        return None
    stmt = select(Project).where(Project.project_id == pid)
    if owner_id is not None:
        stmt = stmt.where(Project.owner_id == to_uuid(owner_id))
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def create_project(
    session: AsyncSession,
    owner_id: str,
    fields: Dict[str, Any],
) -> Project:
    project = Project(project_id=uuid.uuid4(), owner_id=to_uuid(owner_id), **fields)
    session.add(project)
    await session.flush()
    return project


async def update_project(
    session: AsyncSession,
    project: Project,
    fields: Dict[str, Any],
) -> Project:
    for name, value in fields.items():
        setattr(project, name, value)
    project.updated_at = datetime.now(timezone.utc)
    await session.flush()
    return project


async def delete_project(session: AsyncSession, project: Project) -> None:
    """Delete a project together with its comments and messages."""
    await session.execute(delete(Comment).where(Comment.project_id == project.project_id))
    await session.execute(delete(Message).where(Message.project_id == project.project_id))
    await session.delete(project)
    await session.flush()
    logger.info("Deleted project %s", project.project_id)


# ── Comments ─────────────────────────────────────────────────────────


async def list_comments(session: AsyncSession, project_id: str) -> List[Comment]:
    pid = to_uuid(project_id)
    if pid is None:
        return []
    result = await session.execute(
        select(Comment)
        .where(Comment.project_id == pid)
        .order_by(Comment.created_at.asc())
    )
    return list(result.scalars().all())


async def add_comment(
    session: AsyncSession,
    project_id: uuid.UUID,
    user: str,
    text: str,
) -> Comment:
    comment = Comment(comment_id=uuid.uuid4(), project_id=project_id, user=user, text=text)
    session.add(comment)
    await session.flush()
    return comment


async def delete_comment(session: AsyncSession, comment_id: str) -> bool:
    """Delete a comment; returns ``False`` when nothing matched."""
    cid = to_uuid(comment_id)
    if cid is None:
        return False
    comment = await session.get(Comment, cid)
    if comment is None:
        return False
    await session.delete(comment)
    await session.flush()
    return True


# ── Messages ─────────────────────────────────────────────────────────


async def list_messages(session: AsyncSession, project_id: uuid.UUID) -> List[Message]:
    result = await session.execute(
        select(Message)
        .where(Message.project_id == project_id)
        .order_by(Message.created_at.asc())
    )
    return list(result.scalars().all())


async def add_message(
    session: AsyncSession,
    project_id: uuid.UUID,
    sender_id: str,
    content: str,
) -> Message:
    message = Message(
        message_id=uuid.uuid4(),
        project_id=project_id,
        sender_id=to_uuid(sender_id),
        content=content,
    )
    session.add(message)
    await session.flush()
    return message
