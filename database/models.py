"""
SQLAlchemy ORM models.

Column types are the dialect-neutral ones (``Uuid``, ``DateTime``) so the same
models run on PostgreSQL in production and SQLite in tests.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, relationship


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    user_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String(64), unique=True, nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    projects = relationship("Project", back_populates="owner", cascade="all, delete-orphan")

    def to_public_dict(self) -> dict:
        """Profile view of the record; the password hash is never included."""
        return {
            "id": str(self.user_id),
            "username": self.username,
            "email": self.email,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


class Project(Base):
    __tablename__ = "projects"

    project_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, default="")
    language = Column(String(32), default="javascript")
    code = Column(Text, default="")
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow)

    owner = relationship("User", back_populates="projects")
    comments = relationship("Comment", back_populates="project", cascade="all, delete-orphan")
    messages = relationship("Message", back_populates="project", cascade="all, delete-orphan")

    __table_args__ = (Index("ix_projects_owner_created", "owner_id", "created_at"),)

    def to_dict(self) -> dict:
        return {
            "id": str(self.project_id),
            "ownerId": str(self.owner_id),
            "name": self.name,
            "description": self.description or "",
            "language": self.language,
            "code": self.code or "",
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


class Comment(Base):
    __tablename__ = "comments"

    comment_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_id = Column(Uuid(as_uuid=True), ForeignKey("projects.project_id", ondelete="CASCADE"), nullable=False)
    user = Column(String(128), nullable=False)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    project = relationship("Project", back_populates="comments")

    __table_args__ = (Index("ix_comments_project_created", "project_id", "created_at"),)

    def to_dict(self) -> dict:
        return {
            "id": str(self.comment_id),
            "projectId": str(self.project_id),
            "user": self.user,
            "text": self.text,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


class Message(Base):
    __tablename__ = "messages"

    message_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_id = Column(Uuid(as_uuid=True), ForeignKey("projects.project_id", ondelete="CASCADE"), nullable=False)
    sender_id = Column(Uuid(as_uuid=True), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    project = relationship("Project", back_populates="messages")

    __table_args__ = (Index("ix_messages_project_created", "project_id", "created_at"),)

    def to_dict(self) -> dict:
        return {
            "id": str(self.message_id),
            "projectId": str(self.project_id),
            "senderId": str(self.sender_id),
            "content": self.content,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
