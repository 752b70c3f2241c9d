"""Search and embedding schemas."""

from pydantic import BaseModel, Field

from cognote.config import settings
from cognote.schemas.note import NoteResponse


class SearchRequest(BaseModel):
    """Schema for hybrid search request."""

    user_id: str = Field(min_length=1)
    query: str = ""
    embedding: list[float] | None = None
    limit: int = settings.search_default_limit
    threshold: float = settings.search_default_threshold
    exclude_ids: list[str] = []
    category: str | None = None
    tag: str | None = None


class SearchResultItem(BaseModel):
    """Schema for a single search result with similarity score."""

    note: NoteResponse
    similarity: float
    search_mode: str


class SearchResponse(BaseModel):
    """Schema for search results."""

    results: list[SearchResultItem]
    search_type: str
    count: int


class EmbeddingRequest(BaseModel):
    """Schema for embedding generation."""

    text: str = ""
    allow_fallback: bool = False


class EmbeddingResponse(BaseModel):
    """Schema for a generated embedding."""

    embedding: list[float]
    fallback: bool = False
