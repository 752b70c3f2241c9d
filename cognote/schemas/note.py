"""Note schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from cognote.models.note import Note


class NoteCreate(BaseModel):
    """Schema for memory creation."""

    user_id: str = Field(min_length=1)
    title: str = ""
    content: str = ""
    summary: str | None = None
    category: str | None = None
    memory_type: str | None = None
    tags: list[str] | str | None = None
    source_url: str | None = None
    has_reminder: bool = False
    action_items: list[str] | None = None
    next_steps: list[str] | None = None
    priority: str | None = None
    embedding: list[float] | None = None


class NoteUpdate(BaseModel):
    """Schema for memory updates."""

    title: str | None = None
    content: str | None = None
    summary: str | None = None
    category: str | None = None
    memory_type: str | None = None
    tags: list[str] | str | None = None
    source_url: str | None = None
    has_reminder: bool | None = None
    action_items: list[str] | None = None
    next_steps: list[str] | None = None
    priority: str | None = None
    embedding: list[float] | None = None


class NoteResponse(BaseModel):
    """Schema for note response."""

    id: str
    title: str
    content: str
    summary: str | None
    category: str
    memory_type: str
    tags: list[str]
    source_url: str | None
    has_reminder: bool
    action_items: list[str] | None
    next_steps: list[str] | None
    priority: str | None
    has_embedding: bool = False
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @classmethod
    def from_note(cls, note: Note) -> "NoteResponse":
        response = cls.model_validate(note)
        response.has_embedding = note.embedding is not None
        return response


class NoteListResponse(BaseModel):
    """Schema for paginated note list."""

    notes: list[NoteResponse]
    total: int


class TagsResponse(BaseModel):
    """Schema for a user's tags."""

    tags: list[str]
