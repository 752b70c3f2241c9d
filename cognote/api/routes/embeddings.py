"""Embedding endpoint."""

import logging

from fastapi import APIRouter

from cognote.api.deps import EmbedderDep
from cognote.schemas.search import EmbeddingRequest, EmbeddingResponse
from cognote.utils.exceptions import EmbeddingError, InvalidInputError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["embeddings"])


@router.post("/embeddings", response_model=EmbeddingResponse)
async def create_embedding(
    request: EmbeddingRequest, embedder: EmbedderDep
) -> EmbeddingResponse:
    """
    Embed text with the local model.

    With ``allow_fallback`` a keyword vector is returned when the model is
    unavailable; it is flagged and should not be stored on a memory.
    """
    try:
        embedding = await embedder.embed(request.text)
        return EmbeddingResponse(embedding=embedding)
    except InvalidInputError as e:
        raise e.to_http_exception()
    except EmbeddingError as e:
        if not request.allow_fallback:
            raise e.to_http_exception()
        logger.warning(f"Returning keyword fallback vector: {e}")
        return EmbeddingResponse(
            embedding=embedder.fallback_embed(request.text), fallback=True
        )
