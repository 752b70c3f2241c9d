"""Chat session management and history persistence."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, select

from cognote.database import engine
from cognote.models.chat import DEFAULT_SESSION_TITLE, ChatMessage, ChatSession
from cognote.services.assistant_service import AGENT_NAME, AssistantResult
from cognote.utils.datetime import utc_now
from cognote.utils.exceptions import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)

SESSION_TITLE_CHARS = 50


def title_from_message(message: str) -> str:
    """Session title derived from the opening message."""
    text = " ".join(message.split())
    if not text:
        return DEFAULT_SESSION_TITLE
    if len(text) <= SESSION_TITLE_CHARS:
        return text
    return text[:SESSION_TITLE_CHARS].rstrip() + "..."


class ChatService:
    """Stores chat sessions and their turns, scoped to a user."""

    def __init__(self, session: Session):
        self.session = session

    def create_session(self, user_id: str, title: str | None = None) -> ChatSession:
        chat_session = ChatSession(
            user_id=user_id,
            title=(title or "").strip() or DEFAULT_SESSION_TITLE,
        )
        self.session.add(chat_session)
        self.session.commit()
        self.session.refresh(chat_session)
        logger.info(f"Created chat session {chat_session.id} for user {user_id}")
        return chat_session

    def list_sessions(self, user_id: str, limit: int = 10) -> list[ChatSession]:
        """Most recently active sessions first."""
        statement = (
            select(ChatSession)
            .where(ChatSession.user_id == user_id)
            .order_by(col(ChatSession.updated_at).desc())
            .limit(limit)
        )
        return list(self.session.exec(statement).all())

    def get_session(self, session_id: str, user_id: str) -> ChatSession:
        """
        Get a chat session, ensuring user ownership.

        Raises:
            NotFoundError: If the session is missing or belongs to another user
        """
        chat_session = self.session.get(ChatSession, session_id)
        if not chat_session or chat_session.user_id != user_id:
            raise NotFoundError("Chat session")
        return chat_session

    def rename_session(self, session_id: str, user_id: str, title: str) -> ChatSession:
        """
        Raises:
            InvalidInputError: If the title is blank
            NotFoundError: If the session is missing or belongs to another user
        """
        if not title.strip():
            raise InvalidInputError("Title is required")
        chat_session = self.get_session(session_id, user_id)
        chat_session.title = title.strip()
        chat_session.updated_at = utc_now()
        self.session.add(chat_session)
        self.session.commit()
        self.session.refresh(chat_session)
        return chat_session

    def delete_session(self, session_id: str, user_id: str) -> None:
        """
        Delete a session together with its messages.

        Raises:
            NotFoundError: If the session is missing or belongs to another user
        """
        chat_session = self.get_session(session_id, user_id)
        for message in self.get_messages(session_id, user_id):
            self.session.delete(message)
        self.session.delete(chat_session)
        self.session.commit()
        logger.info(f"Deleted chat session {session_id}")

    def save_turn(
        self, session_id: str, user_id: str, message: str, result: AssistantResult
    ) -> None:
        """
        Persist the user message and the assistant reply.

        An unknown session id starts a new session titled after the message.
        A session owned by another user is left untouched.
        """
        chat_session = self.session.get(ChatSession, session_id)
        if chat_session is None:
            chat_session = ChatSession(
                id=session_id, user_id=user_id, title=title_from_message(message)
            )
        elif chat_session.user_id != user_id:
            logger.warning(
                f"Not saving chat turn: session {session_id} belongs to another user"
            )
            return
        chat_session.updated_at = utc_now()
        self.session.add(chat_session)

        self.session.add(
            ChatMessage(session_id=session_id, user_id=user_id, role="user", content=message)
        )
        self.session.add(
            ChatMessage(
                session_id=session_id,
                user_id=user_id,
                role="assistant",
                content=result.answer,
                agent_used=AGENT_NAME,
                sources=[s.note.id for s in result.sources],
            )
        )
        self.session.commit()
        logger.info(f"Saved chat messages for session {session_id}")

    def get_messages(self, session_id: str, user_id: str) -> list[ChatMessage]:
        statement = (
            select(ChatMessage)
            .where(ChatMessage.session_id == session_id, ChatMessage.user_id == user_id)
            .order_by(col(ChatMessage.created_at), col(ChatMessage.id))
        )
        return list(self.session.exec(statement).all())


def save_turn_in_background(
    session_id: str,
    user_id: str,
    message: str,
    result: AssistantResult,
    bind=None,
) -> None:
    """
    Background task wrapper around ChatService.save_turn.

    Runs after the response has been sent, so failures are only logged.
    """
    try:
        with Session(bind or engine) as session:
            ChatService(session).save_turn(session_id, user_id, message, result)
    except SQLAlchemyError as e:
        logger.error(f"Error saving chat history for session {session_id}: {e}")
