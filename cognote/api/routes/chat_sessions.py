"""Chat session endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from cognote.api.deps import ChatServiceDep, TenantDep
from cognote.schemas.chat import (
    ChatMessageResponse,
    ChatSessionCreate,
    ChatSessionDetail,
    ChatSessionListResponse,
    ChatSessionResponse,
    ChatSessionUpdate,
)
from cognote.utils.exceptions import InvalidInputError, NotFoundError

router = APIRouter(prefix="/api/chat/sessions", tags=["chat"])


@router.get("", response_model=ChatSessionListResponse)
def list_sessions(
    user_id: TenantDep,
    chat_service: ChatServiceDep,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> ChatSessionListResponse:
    """List the user's chat sessions, most recently active first."""
    sessions = chat_service.list_sessions(user_id, limit=limit)
    return ChatSessionListResponse(
        sessions=[ChatSessionResponse.model_validate(s) for s in sessions]
    )


@router.post(
    "", response_model=ChatSessionResponse, status_code=status.HTTP_201_CREATED
)
def create_session(
    data: ChatSessionCreate, chat_service: ChatServiceDep
) -> ChatSessionResponse:
    """Start an empty chat session."""
    chat_session = chat_service.create_session(data.user_id, data.title)
    return ChatSessionResponse.model_validate(chat_session)


@router.get("/{session_id}", response_model=ChatSessionDetail)
def get_session(
    session_id: str, user_id: TenantDep, chat_service: ChatServiceDep
) -> ChatSessionDetail:
    """
    Get a chat session with its messages in order.
    """
    try:
        chat_session = chat_service.get_session(session_id, user_id)
    except NotFoundError as e:
        raise e.to_http_exception()
    messages = chat_service.get_messages(session_id, user_id)
    return ChatSessionDetail(
        session=ChatSessionResponse.model_validate(chat_session),
        messages=[ChatMessageResponse.model_validate(m) for m in messages],
    )


@router.patch("/{session_id}", response_model=ChatSessionResponse)
def rename_session(
    session_id: str,
    data: ChatSessionUpdate,
    user_id: TenantDep,
    chat_service: ChatServiceDep,
) -> ChatSessionResponse:
    """Rename a chat session."""
    try:
        chat_session = chat_service.rename_session(session_id, user_id, data.title)
    except (InvalidInputError, NotFoundError) as e:
        raise e.to_http_exception()
    return ChatSessionResponse.model_validate(chat_session)


@router.delete("/{session_id}")
def delete_session(
    session_id: str, user_id: TenantDep, chat_service: ChatServiceDep
) -> dict:
    """
    Delete a chat session and its messages.
    """
    try:
        chat_service.delete_session(session_id, user_id)
        return {"success": True, "message": "Session deleted successfully"}
    except NotFoundError as e:
        raise e.to_http_exception()
