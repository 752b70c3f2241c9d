"""API dependencies for dependency injection."""

from collections.abc import Generator
from typing import Annotated

from fastapi import Depends, Query
from sqlmodel import Session

from cognote.database import get_session
from cognote.services.assistant_service import MemoryAssistant
from cognote.services.chat_service import ChatService
from cognote.services.embedding_service import EmbeddingService, embedding_service
from cognote.services.llm_service import AnswerGenerator, LLMService, get_llm_service
from cognote.services.note_service import NoteService


def get_db() -> Generator[Session, None, None]:
    """Get database session dependency."""
    yield from get_session()


SessionDep = Annotated[Session, Depends(get_db)]


def get_embedder() -> EmbeddingService:
    """Get the process-wide embedding service."""
    return embedding_service


EmbedderDep = Annotated[EmbeddingService, Depends(get_embedder)]


def get_llm() -> LLMService:
    """Get a completion client configured from settings."""
    return get_llm_service()


LLMDep = Annotated[LLMService, Depends(get_llm)]


def get_tenant_id(user_id: Annotated[str, Query(min_length=1)]) -> str:
    """
    Get the tenant scope of a request.

    Authentication happens upstream; the caller forwards the user ID.
    """
    return user_id


TenantDep = Annotated[str, Depends(get_tenant_id)]


def get_note_service(
    session: SessionDep, embedder: EmbedderDep, llm: LLMDep
) -> NoteService:
    return NoteService(session, embedder, llm)


NoteServiceDep = Annotated[NoteService, Depends(get_note_service)]


def get_assistant(
    session: SessionDep, embedder: EmbedderDep, llm: LLMDep
) -> MemoryAssistant:
    """Build the memory assistant for a request."""
    return MemoryAssistant(session, embedder, AnswerGenerator(llm))


AssistantDep = Annotated[MemoryAssistant, Depends(get_assistant)]


def get_chat_service(session: SessionDep) -> ChatService:
    return ChatService(session)


ChatServiceDep = Annotated[ChatService, Depends(get_chat_service)]
