"""Note model."""

import uuid
from datetime import datetime

from sqlalchemy import JSON, Column, Index, LargeBinary
from sqlmodel import Field, SQLModel

from cognote.utils.datetime import utc_now


def _new_id() -> str:
    return uuid.uuid4().hex


class Note(SQLModel, table=True):  # type: ignore
    """A stored memory with optional embedding and task metadata."""

    __tablename__ = "notes"  # type: ignore

    id: str = Field(default_factory=_new_id, primary_key=True)
    user_id: str = Field(index=True)

    # Content
    title: str
    content: str
    summary: str | None = Field(default=None)
    category: str = Field(default="Research", index=True)
    memory_type: str = Field(default="Note")
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    source_url: str | None = Field(default=None)
    has_reminder: bool = Field(default=False)

    # Task-like fields (only set on action-oriented memories)
    action_items: list[str] | None = Field(default=None, sa_column=Column(JSON))
    next_steps: list[str] | None = Field(default=None, sa_column=Column(JSON))
    priority: str | None = Field(default=None)

    # Vector embedding (stored as BLOB - serialized float32 array)
    embedding: bytes | None = Field(default=None, sa_column=Column(LargeBinary))

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)

    __table_args__ = (
        Index("ix_notes_user_created", "user_id", "created_at"),
        Index("ix_notes_user_category", "user_id", "category"),
    )
