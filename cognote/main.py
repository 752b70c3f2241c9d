"""Cognote API - Main Application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cognote import __version__
from cognote.api.routes.chat import router as chat_router
from cognote.api.routes.chat_sessions import router as chat_sessions_router
from cognote.api.routes.embeddings import router as embeddings_router
from cognote.api.routes.memories import router as memories_router
from cognote.api.routes.search import router as search_router
from cognote.config import settings
from cognote.database import create_db_and_tables
from cognote.services.embedding_service import embedding_service

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    create_db_and_tables()
    yield


app = FastAPI(
    title=settings.app_name,
    description="Personal memory store with retrieval-augmented chat",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(chat_router)
app.include_router(chat_sessions_router)
app.include_router(embeddings_router)
app.include_router(memories_router)
app.include_router(search_router)


@app.get("/health")
async def health_check() -> dict:
    """
    System health check.

    Returns status of the application and its dependencies.
    """
    return {
        "status": "ok",
        "embedding_model": settings.embedding_model,
        "embedding_model_loaded": embedding_service.is_loaded,
        "db_connected": True,
    }
