"""Retrieval-augmented memory assistant."""

import logging
from dataclasses import dataclass, field

from sqlmodel import Session

from cognote.config import settings
from cognote.schemas.chat import ConversationTurn
from cognote.services.context_service import ContextAssembler
from cognote.services.embedding_service import EmbeddingService
from cognote.services.llm_service import AnswerGenerator
from cognote.services.search_service import SearchQuery, SearchResult, SearchService
from cognote.utils.exceptions import EmbeddingError, InvalidInputError
from cognote.utils.vector import is_valid_embedding

logger = logging.getLogger(__name__)

AGENT_NAME = "Memory Assistant"


@dataclass
class AssistantResult:
    """Answer plus the memories it was built from."""

    answer: str
    sources: list[SearchResult] = field(default_factory=list)
    search_performed: bool = False
    memory_count: int = 0


class MemoryAssistant:
    """
    Answers questions from a user's memories.

    Pipeline: embed the question, hybrid search, review filter, context
    assembly, answer generation.
    """

    def __init__(
        self,
        session: Session,
        embedder: EmbeddingService,
        generator: AnswerGenerator,
        assembler: ContextAssembler | None = None,
        candidate_limit: int | None = None,
        source_limit: int | None = None,
        threshold: float | None = None,
    ):
        """
        Initialize the assistant.

        Args:
            session: Database session
            embedder: Shared embedding service
            generator: Answer generator
            assembler: Context assembler
            candidate_limit: Notes to retrieve per question
            source_limit: Notes to cite in the result
            threshold: Minimum vector similarity
        """
        self.search_service = SearchService(session, dimension=embedder.dimension)
        self.embedder = embedder
        self.generator = generator
        self.assembler = assembler or ContextAssembler()
        self.candidate_limit = candidate_limit or settings.assistant_candidate_limit
        self.source_limit = source_limit or settings.assistant_source_limit
        self.threshold = (
            threshold
            if threshold is not None
            else settings.assistant_similarity_threshold
        )

    async def _embed_query(self, query: str) -> list[float] | None:
        try:
            return await self.embedder.embed(query)
        except EmbeddingError as e:
            logger.warning(f"Query embedding failed, searching lexically: {e}")
            return None

    async def process_message(
        self,
        query: str,
        user_id: str,
        embedding: list[float] | None = None,
        history: list[ConversationTurn] | None = None,
    ) -> AssistantResult:
        """
        Answer a question from the user's memories.

        Args:
            query: The user's question
            user_id: Tenant whose memories are searched
            embedding: Optional precomputed query embedding
            history: Recent conversation turns

        Returns:
            AssistantResult with answer, cited sources and diagnostics

        Raises:
            InvalidInputError: If the query is empty
        """
        query = (query or "").strip()
        if not query:
            raise InvalidInputError("Message is required")

        if not is_valid_embedding(embedding, self.embedder.dimension):
            embedding = await self._embed_query(query)

        candidates = self.search_service.search(
            SearchQuery(
                user_id=user_id,
                text=query,
                embedding=embedding,
                limit=self.candidate_limit,
                threshold=self.threshold,
            )
        )

        context = self.assembler.build(query, candidates, history)
        logger.info(
            f"Assistant using {len(context.results)} of {len(candidates)} candidates"
            + (" (review mode)" if context.review_mode else "")
        )

        answer = await self.generator.generate(query, context.memories, context.history)

        return AssistantResult(
            answer=answer,
            sources=context.results[: self.source_limit],
            search_performed=True,
            memory_count=len(context.results),
        )
