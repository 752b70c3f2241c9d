"""Chat schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from cognote.schemas.note import NoteResponse


class ConversationTurn(BaseModel):
    """A single chat turn supplied by the caller."""

    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime | None = None


class ChatRequest(BaseModel):
    """Schema for a chat message."""

    message: str = ""
    user_id: str = Field(min_length=1)
    embedding: list[float] | None = None
    chat_history: list[ConversationTurn] = []
    session_id: str | None = None


class SourceItem(BaseModel):
    """A memory cited alongside an answer."""

    note: NoteResponse
    similarity: float
    search_mode: str


class ChatMetadata(BaseModel):
    """Retrieval diagnostics for a chat answer."""

    memory_count: int
    search_performed: bool


class ChatResponse(BaseModel):
    """Schema for a chat answer."""

    response: str
    agent_used: str
    sources: list[SourceItem]
    metadata: ChatMetadata


class ChatSessionCreate(BaseModel):
    """Schema for starting a chat session."""

    user_id: str = Field(min_length=1)
    title: str | None = None


class ChatSessionUpdate(BaseModel):
    """Schema for renaming a chat session."""

    title: str = Field(min_length=1)


class ChatSessionResponse(BaseModel):
    """Schema for a chat session."""

    id: str
    title: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ChatMessageResponse(BaseModel):
    """Schema for a stored chat message."""

    id: int
    role: str
    content: str
    agent_used: str | None
    sources: list[str]
    created_at: datetime

    model_config = {"from_attributes": True}


class ChatSessionListResponse(BaseModel):
    """Schema for a user's chat sessions."""

    sessions: list[ChatSessionResponse]


class ChatSessionDetail(BaseModel):
    """Schema for a chat session with its messages."""

    session: ChatSessionResponse
    messages: list[ChatMessageResponse]
