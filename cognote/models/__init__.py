"""Database models."""

from cognote.models.chat import ChatMessage, ChatSession
from cognote.models.note import Note

__all__ = ["ChatMessage", "ChatSession", "Note"]
