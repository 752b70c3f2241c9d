"""Hybrid search: vector similarity first, lexical substring fallback."""

import logging
from dataclasses import dataclass, field

from sqlmodel import Session

from cognote.config import settings
from cognote.models.note import Note
from cognote.repositories.note_repository import NoteRepository
from cognote.utils.exceptions import VectorSearchError
from cognote.utils.vector import is_valid_embedding, serialize_vector

logger = logging.getLogger(__name__)

MIN_LIMIT = 1
MAX_LIMIT = 100

# Lexical results carry placeholder scores so the UI can rank them next to
# vector hits. They are positional, not a relevance measure.
LEXICAL_SCORE_START = 0.8
LEXICAL_SCORE_STEP = 0.1


def lexical_score(position: int) -> float:
    """Synthetic score for the n-th lexical result (0.8, 0.7, ... floor 0)."""
    return max(0.0, round(LEXICAL_SCORE_START - position * LEXICAL_SCORE_STEP, 2))


@dataclass
class SearchQuery:
    """A tenant-scoped search request."""

    user_id: str
    text: str = ""
    embedding: list[float] | None = None
    excluded_ids: list[str] = field(default_factory=list)
    limit: int = settings.search_default_limit
    threshold: float = settings.search_default_threshold
    category: str | None = None
    tag: str | None = None

    def __post_init__(self):
        if not self.user_id:
            raise ValueError("SearchQuery requires a user_id")
        self.text = (self.text or "").strip()
        self.limit = min(MAX_LIMIT, max(MIN_LIMIT, int(self.limit)))
        self.threshold = min(1.0, max(0.0, float(self.threshold)))

    @property
    def has_filters(self) -> bool:
        return bool(self.category or self.tag)


@dataclass
class SearchResult:
    """A matched note with its score and the mode that produced it."""

    note: Note
    similarity: float
    mode: str  # vector, lexical


class SearchService:
    """Service for hybrid note search."""

    def __init__(self, session: Session, dimension: int | None = None):
        """
        Initialize the search service.

        Args:
            session: Database session
            dimension: Expected embedding dimension
        """
        self.repository = NoteRepository(session)
        self.dimension = dimension or settings.embedding_dimension

    def search(self, query: SearchQuery) -> list[SearchResult]:
        """
        Search a user's notes.

        Vector mode runs when the query carries a usable embedding. If it
        fails or finds nothing, lexical mode runs instead. A query with no
        text, no embedding and no filter returns nothing.

        Args:
            query: Search parameters

        Returns:
            Ranked search results, at most ``query.limit``
        """
        embedding = query.embedding
        if embedding is not None and is_valid_embedding(embedding, self.dimension):
            try:
                results = self._vector_search(query, embedding)
            except VectorSearchError as e:
                logger.warning(f"Vector search unavailable, using lexical search: {e}")
            else:
                if results:
                    logger.info(f"Vector search found {len(results)} results")
                    return results
                logger.info("Vector search found no results, using lexical search")
        elif embedding is not None:
            logger.warning(
                f"Ignoring query embedding with {len(embedding)} dimensions "
                f"(expected {self.dimension})"
            )

        if not query.text and not query.has_filters:
            logger.info("Empty search query without filters, returning no results")
            return []

        return self._lexical_search(query)

    def _vector_search(
        self, query: SearchQuery, embedding: list[float]
    ) -> list[SearchResult]:
        rows = self.repository.vector_search(
            user_id=query.user_id,
            query_vec=serialize_vector(embedding),
            threshold=query.threshold,
            limit=query.limit,
            excluded_ids=query.excluded_ids,
            category=query.category,
            tag=query.tag,
        )
        return [
            SearchResult(
                note=note,
                similarity=min(1.0, max(0.0, similarity)),
                mode="vector",
            )
            for note, similarity in rows
        ]

    def _lexical_search(self, query: SearchQuery) -> list[SearchResult]:
        notes = self.repository.text_search(
            user_id=query.user_id,
            text=query.text,
            limit=query.limit,
            excluded_ids=query.excluded_ids,
            category=query.category,
            tag=query.tag,
        )
        logger.info(f"Lexical search found {len(notes)} results")
        return [
            SearchResult(note=note, similarity=lexical_score(i), mode="lexical")
            for i, note in enumerate(notes)
        ]
