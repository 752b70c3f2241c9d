"""Note service for memory CRUD and embedding maintenance."""

import logging
from datetime import UTC, datetime

from sqlmodel import Session

from cognote.models.note import Note
from cognote.repositories.note_repository import NoteRepository
from cognote.schemas.note import NoteCreate, NoteUpdate
from cognote.services.embedding_service import EmbeddingService, build_embedding_text
from cognote.services.llm_service import LLMService
from cognote.utils import DEFAULT_CATEGORY, DEFAULT_MEMORY_TYPE, parse_tags
from cognote.utils.exceptions import EmbeddingError, InvalidInputError, NotFoundError
from cognote.utils.vector import is_valid_embedding, serialize_vector

logger = logging.getLogger(__name__)


class NoteService:
    """Service for memory CRUD operations."""

    def __init__(
        self,
        session: Session,
        embedder: EmbeddingService,
        llm: LLMService | None = None,
    ):
        """
        Initialize the note service.

        Args:
            session: Database session
            embedder: Embedding service used at write time
            llm: Optional LLM service used for summaries
        """
        self.repository = NoteRepository(session)
        self.embedder = embedder
        self.llm = llm

    async def _compute_embedding(
        self, note: Note, supplied: list[float] | None
    ) -> bytes | None:
        """
        Resolve the embedding to store for a note.

        A supplied vector is used when it has the right dimension. Otherwise
        the model embeds the note text. Returns None when no real embedding
        is available; the keyword fallback vector is never stored.
        """
        if supplied is not None:
            if is_valid_embedding(supplied, self.embedder.dimension):
                return serialize_vector(supplied)
            logger.warning(
                f"Ignoring supplied embedding with {len(supplied)} dimensions"
            )

        try:
            vector = await self.embedder.embed(
                build_embedding_text(note.title, note.content, note.tags)
            )
        except EmbeddingError as e:
            logger.error(f"Could not embed note {note.id}: {e}")
            return None
        return serialize_vector(vector)

    async def _summarize(self, content: str) -> str | None:
        if self.llm is None:
            return None
        return await self.llm.summarize(content)

    async def create_note(self, data: NoteCreate) -> Note:
        """
        Create a new memory.

        Args:
            data: Memory fields including the owning user

        Returns:
            Created Note instance

        Raises:
            InvalidInputError: If title or content is missing
        """
        if not data.title.strip() or not data.content.strip():
            raise InvalidInputError("Title and content are required")

        note = Note(
            user_id=data.user_id,
            title=data.title.strip(),
            content=data.content,
            summary=data.summary,
            category=data.category or DEFAULT_CATEGORY,
            memory_type=data.memory_type or DEFAULT_MEMORY_TYPE,
            tags=parse_tags(data.tags),
            source_url=data.source_url,
            has_reminder=data.has_reminder,
            action_items=data.action_items,
            next_steps=data.next_steps,
            priority=data.priority,
        )
        if note.summary is None:
            note.summary = await self._summarize(note.content)

        note.embedding = await self._compute_embedding(note, data.embedding)
        note = self.repository.save(note)
        logger.info(
            f"Created note {note.id} for user {note.user_id} "
            f"(embedding: {note.embedding is not None})"
        )
        return note

    def get_note(self, note_id: str, user_id: str) -> Note:
        """
        Get a single note by ID, ensuring user ownership.

        Raises:
            NotFoundError: If note not found or doesn't belong to user
        """
        note = self.repository.get(note_id, user_id)
        if not note:
            raise NotFoundError("Memory")
        return note

    def list_notes(
        self,
        user_id: str,
        skip: int = 0,
        limit: int = 50,
        category: str | None = None,
        memory_type: str | None = None,
    ) -> tuple[list[Note], int]:
        """List notes for a user with pagination and optional filters."""
        return self.repository.list_for_user(
            user_id,
            skip=skip,
            limit=limit,
            category=category,
            memory_type=memory_type,
        )

    def list_tags(self, user_id: str) -> list[str]:
        return self.repository.list_tags(user_id)

    async def update_note(self, note_id: str, user_id: str, data: NoteUpdate) -> Note:
        """
        Update a memory.

        All changes are validated before any is applied. When the content
        changes and no summary is given, the summary is regenerated. When
        the embedded text changes (or a new vector is supplied) the
        embedding is recomputed and replaced as a whole. If no new real
        embedding can be produced the stored one is kept.

        Raises:
            NotFoundError: If note not found or doesn't belong to user
            InvalidInputError: If the update would empty the title or content
        """
        note = self.get_note(note_id, user_id)

        changes = data.model_dump(exclude_unset=True, exclude={"embedding", "tags"})
        for key in ("title", "content"):
            if key in changes and (changes[key] is None or not changes[key].strip()):
                raise InvalidInputError("Title and content are required")
        for key in ("category", "memory_type"):
            if key in changes and changes[key] is None:
                del changes[key]

        old_text = build_embedding_text(note.title, note.content, note.tags)
        content_changed = "content" in changes and changes["content"] != note.content

        for key, value in changes.items():
            setattr(note, key, value)
        if "tags" in data.model_fields_set:
            note.tags = parse_tags(data.tags)

        if content_changed and "summary" not in changes:
            summary = await self._summarize(note.content)
            if summary is not None:
                note.summary = summary

        new_text = build_embedding_text(note.title, note.content, note.tags)
        if data.embedding is not None or new_text != old_text:
            embedding = await self._compute_embedding(note, data.embedding)
            if embedding is not None:
                note.embedding = embedding
            else:
                logger.warning(f"Keeping previous embedding for note {note.id}")

        note.updated_at = datetime.now(UTC)
        return self.repository.save(note)

    def delete_note(self, note_id: str, user_id: str) -> bool:
        """
        Delete a memory.

        Raises:
            NotFoundError: If note not found or doesn't belong to user
        """
        note = self.get_note(note_id, user_id)
        self.repository.delete(note)
        return True
