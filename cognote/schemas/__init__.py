"""Pydantic schemas for request/response validation."""

from cognote.schemas.chat import (
    ChatMessageResponse,
    ChatMetadata,
    ChatRequest,
    ChatResponse,
    ChatSessionCreate,
    ChatSessionDetail,
    ChatSessionListResponse,
    ChatSessionResponse,
    ChatSessionUpdate,
    ConversationTurn,
    SourceItem,
)
from cognote.schemas.note import (
    NoteCreate,
    NoteListResponse,
    NoteResponse,
    NoteUpdate,
    TagsResponse,
)
from cognote.schemas.search import (
    EmbeddingRequest,
    EmbeddingResponse,
    SearchRequest,
    SearchResponse,
    SearchResultItem,
)

__all__ = [
    "ChatMessageResponse",
    "ChatMetadata",
    "ChatRequest",
    "ChatResponse",
    "ChatSessionCreate",
    "ChatSessionDetail",
    "ChatSessionListResponse",
    "ChatSessionResponse",
    "ChatSessionUpdate",
    "ConversationTurn",
    "SourceItem",
    "NoteCreate",
    "NoteListResponse",
    "NoteResponse",
    "NoteUpdate",
    "TagsResponse",
    "EmbeddingRequest",
    "EmbeddingResponse",
    "SearchRequest",
    "SearchResponse",
    "SearchResultItem",
]
