"""API routes module."""

from cognote.api.routes.chat import router as chat_router
from cognote.api.routes.chat_sessions import router as chat_sessions_router
from cognote.api.routes.embeddings import router as embeddings_router
from cognote.api.routes.memories import router as memories_router
from cognote.api.routes.search import router as search_router

__all__ = [
    "chat_router",
    "chat_sessions_router",
    "embeddings_router",
    "memories_router",
    "search_router",
]
