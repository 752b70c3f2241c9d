"""Record store access."""

from cognote.repositories.note_repository import NoteRepository

__all__ = ["NoteRepository"]
