"""Tenant-scoped queries over the notes table."""

import json
import logging

from sqlalchemy import String, cast, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, func, select

from cognote.models.note import Note
from cognote.utils.exceptions import VectorSearchError

logger = logging.getLogger(__name__)


class NoteRepository:
    """
    Read/write access to notes.

    Every query takes the owning ``user_id``; there is no method that can
    return rows across tenants.
    """

    def __init__(self, session: Session):
        self.session = session

    def _scope(
        self,
        user_id: str,
        excluded_ids: list[str] | None = None,
        category: str | None = None,
        tag: str | None = None,
        memory_type: str | None = None,
    ) -> list:
        if not user_id:
            raise ValueError("user_id is required for every note query")

        conditions: list = [Note.user_id == user_id]
        if excluded_ids:
            conditions.append(col(Note.id).not_in(excluded_ids))
        if category:
            conditions.append(Note.category == category)
        if memory_type:
            conditions.append(Note.memory_type == memory_type)
        if tag:
            # Tags are a JSON array; match the serialized element
            conditions.append(
                cast(Note.tags, String).contains(json.dumps(tag), autoescape=True)
            )
        return conditions

    def get(self, note_id: str, user_id: str) -> Note | None:
        """Get a note by ID if it belongs to the user."""
        note = self.session.get(Note, note_id)
        if not note or note.user_id != user_id:
            return None
        return note

    def list_for_user(
        self,
        user_id: str,
        skip: int = 0,
        limit: int = 50,
        category: str | None = None,
        memory_type: str | None = None,
    ) -> tuple[list[Note], int]:
        """List a user's notes, newest first, with total count of matches."""
        conditions = self._scope(user_id, category=category, memory_type=memory_type)
        total = self.session.exec(select(func.count()).select_from(Note).where(*conditions)).one()
        statement = (
            select(Note)
            .where(*conditions)
            .order_by(col(Note.created_at).desc())
            .offset(skip)
            .limit(limit)
        )
        return list(self.session.exec(statement).all()), total

    def list_tags(self, user_id: str) -> list[str]:
        """Return the user's unique tags sorted alphabetically."""
        statement = select(Note.tags).where(*self._scope(user_id))
        tags: set[str] = set()
        for row in self.session.exec(statement).all():
            tags.update(t for t in (row or []) if t)
        return sorted(tags)

    def save(self, note: Note) -> Note:
        self.session.add(note)
        self.session.commit()
        self.session.refresh(note)
        return note

    def delete(self, note: Note) -> None:
        self.session.delete(note)
        self.session.commit()

    def vector_search(
        self,
        user_id: str,
        query_vec: bytes,
        threshold: float,
        limit: int,
        excluded_ids: list[str] | None = None,
        category: str | None = None,
        tag: str | None = None,
    ) -> list[tuple[Note, float]]:
        """
        Find the user's notes closest to a query vector.

        Uses sqlite-vec's cosine distance, so similarity = 1 - distance.

        Args:
            user_id: Owner user ID
            query_vec: Serialized float32 query vector
            threshold: Minimum similarity to keep
            limit: Maximum results to return
            excluded_ids: Note IDs to leave out
            category: Optional category filter
            tag: Optional tag filter

        Returns:
            (note, similarity) pairs ordered by similarity, then recency

        Raises:
            VectorSearchError: If the vector query cannot be executed
        """
        conditions = self._scope(user_id, excluded_ids, category, tag)
        distance = func.vec_distance_cosine(Note.embedding, query_vec)

        statement = (
            select(Note, distance.label("distance"))
            .where(
                *conditions,
                col(Note.embedding).is_not(None),
                func.length(Note.embedding) == len(query_vec),
                distance <= 1.0 - threshold,
            )
            .order_by(distance.asc(), col(Note.created_at).desc())
            .limit(limit)
        )

        try:
            rows = self.session.exec(statement).all()
        except SQLAlchemyError as e:
            logger.error(f"Error executing vector search SQL: {e}")
            self.session.rollback()
            raise VectorSearchError(str(e)) from e

        return [(note, 1.0 - float(dist)) for note, dist in rows]

    def text_search(
        self,
        user_id: str,
        text: str,
        limit: int,
        excluded_ids: list[str] | None = None,
        category: str | None = None,
        tag: str | None = None,
    ) -> list[Note]:
        """
        Case-insensitive substring search over title, content and summary.

        An empty ``text`` applies only the scope and filters.

        Returns:
            Matching notes, newest first
        """
        conditions = self._scope(user_id, excluded_ids, category, tag)

        term = text.strip()
        if term:
            conditions.append(
                or_(
                    col(Note.title).icontains(term, autoescape=True),
                    col(Note.content).icontains(term, autoescape=True),
                    col(Note.summary).icontains(term, autoescape=True),
                )
            )

        statement = (
            select(Note)
            .where(*conditions)
            .order_by(col(Note.created_at).desc(), col(Note.id))
            .limit(limit)
        )
        return list(self.session.exec(statement).all())
