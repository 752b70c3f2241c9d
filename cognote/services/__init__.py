"""Service modules for business logic."""

from cognote.services.assistant_service import AssistantResult, MemoryAssistant
from cognote.services.chat_service import ChatService
from cognote.services.context_service import ContextAssembler
from cognote.services.embedding_service import EmbeddingService
from cognote.services.llm_service import AnswerGenerator, LLMService
from cognote.services.note_service import NoteService
from cognote.services.search_service import SearchQuery, SearchResult, SearchService

__all__ = [
    "AnswerGenerator",
    "AssistantResult",
    "ChatService",
    "ContextAssembler",
    "EmbeddingService",
    "LLMService",
    "MemoryAssistant",
    "NoteService",
    "SearchQuery",
    "SearchResult",
    "SearchService",
]
