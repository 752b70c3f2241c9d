"""Chat session and message models."""

import uuid
from datetime import datetime

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from cognote.utils.datetime import utc_now

DEFAULT_SESSION_TITLE = "New chat"


def _new_id() -> str:
    return uuid.uuid4().hex


class ChatSession(SQLModel, table=True):  # type: ignore
    """A titled conversation owned by one user."""

    __tablename__ = "chat_sessions"  # type: ignore

    id: str = Field(default_factory=_new_id, primary_key=True)
    user_id: str = Field(index=True)
    title: str = Field(default=DEFAULT_SESSION_TITLE)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, index=True)


class ChatMessage(SQLModel, table=True):  # type: ignore
    """A persisted chat turn belonging to a session."""

    __tablename__ = "chat_messages"  # type: ignore

    id: int | None = Field(default=None, primary_key=True)
    session_id: str = Field(index=True)
    user_id: str = Field(index=True)
    role: str  # user, assistant
    content: str
    agent_used: str | None = Field(default=None)
    sources: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=utc_now, index=True)
