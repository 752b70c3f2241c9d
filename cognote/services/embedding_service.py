"""Embedding service backed by a local sentence-transformers model."""

import asyncio
import hashlib
import logging
import re
from collections.abc import Callable

import numpy as np
import torch
from sentence_transformers import SentenceTransformer

from cognote.config import settings
from cognote.utils.exceptions import EmbeddingError, InvalidInputError
from cognote.utils.vector import normalize_vector

logger = logging.getLogger(__name__)

_WORD_SPLIT = re.compile(r"\W+")


def build_embedding_text(title: str, content: str, tags: list[str] | None = None) -> str:
    """
    Build the text a note's embedding is computed from.

    The same (title, content, tags) always yields the same string, so a
    stored embedding can be reproduced from the note alone.
    """
    parts = [title.strip(), content.strip()]
    if tags:
        parts.append("Tags: " + ", ".join(tags))
    return "\n".join(p for p in parts if p)


def keyword_vector(text: str, dimension: int = 384) -> list[float]:
    """
    Hash-bucketed bag-of-words vector, L2-normalized.

    A degraded stand-in for callers that prefer an approximate vector over
    no vector when the model is unavailable. It lives in a different space
    from model embeddings and must never be stored on a note.
    """
    vector = np.zeros(dimension, dtype=np.float32)
    for word in _WORD_SPLIT.split(text.lower()):
        if len(word) <= 2:
            continue
        bucket = int(hashlib.md5(word.encode("utf-8")).hexdigest(), 16) % dimension
        vector[bucket] += 1.0
    return normalize_vector(vector)


def _default_device() -> str:
    if torch.cuda.is_available():
        return "cuda"
    if torch.backends.mps.is_available():
        return "mps"
    return "cpu"


class EmbeddingService:
    """
    Lazily loaded, process-wide text embedder.

    The model is loaded on first use. Concurrent first callers wait on the
    same load instead of each loading a copy.
    """

    def __init__(
        self,
        model_name: str | None = None,
        dimension: int | None = None,
        device: str | None = None,
        model_factory: Callable[[str, str], SentenceTransformer] | None = None,
    ):
        """
        Initialize the embedding service.

        Args:
            model_name: sentence-transformers model to load
            dimension: Expected output dimension
            device: Torch device; auto-detected when omitted
            model_factory: Builds the model from (name, device)
        """
        self.model_name = model_name or settings.embedding_model
        self.dimension = dimension or settings.embedding_dimension
        self.device = device or settings.embedding_device
        self._model_factory = model_factory or (
            lambda name, dev: SentenceTransformer(name, device=dev)
        )
        self._model: SentenceTransformer | None = None
        self._lock = asyncio.Lock()

    @property
    def is_loaded(self) -> bool:
        return self._model is not None

    async def get_model(self) -> SentenceTransformer:
        """Return the loaded model, loading it once if needed."""
        if self._model is not None:
            return self._model

        async with self._lock:
            if self._model is None:
                device = self.device or _default_device()
                logger.info(f"Loading embedding model {self.model_name} on {device}")
                try:
                    self._model = await asyncio.to_thread(
                        self._model_factory, self.model_name, device
                    )
                except Exception as e:
                    logger.error(f"Failed to load embedding model {self.model_name}: {e}")
                    raise EmbeddingError(
                        f"Could not load embedding model '{self.model_name}'"
                    ) from e
                logger.info("Embedding model loaded")
        return self._model

    async def embed(self, text: str) -> list[float]:
        """
        Generate a unit-normalized embedding for the given text.

        Args:
            text: Text to embed

        Returns:
            List of floats with length ``self.dimension``

        Raises:
            InvalidInputError: If text is empty
            EmbeddingError: If the model cannot be loaded or run
        """
        if not text or not text.strip():
            raise InvalidInputError("Text is required")

        model = await self.get_model()
        try:
            output = await asyncio.to_thread(
                model.encode, text, normalize_embeddings=True
            )
        except Exception as e:
            logger.error(f"Embedding inference failed: {e}")
            raise EmbeddingError("Embedding inference failed") from e

        vector = normalize_vector(output)
        if len(vector) != self.dimension:
            raise EmbeddingError(
                f"Model returned {len(vector)} dimensions, expected {self.dimension}"
            )
        return vector

    def fallback_embed(self, text: str) -> list[float]:
        """Keyword vector in this service's dimensionality."""
        return keyword_vector(text, self.dimension)


# Global instance (model loads on first embed)
embedding_service = EmbeddingService()
