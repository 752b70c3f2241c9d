"""Chat endpoint."""

import logging

from fastapi import APIRouter, BackgroundTasks, HTTPException, status

from cognote.api.deps import AssistantDep, SessionDep
from cognote.schemas.chat import ChatMetadata, ChatRequest, ChatResponse, SourceItem
from cognote.schemas.note import NoteResponse
from cognote.services.assistant_service import AGENT_NAME
from cognote.services.chat_service import save_turn_in_background
from cognote.utils.exceptions import InvalidInputError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    session: SessionDep,
    assistant: AssistantDep,
    background_tasks: BackgroundTasks,
) -> ChatResponse:
    """
    Answer a message from the user's memories.

    The turn is saved after the response when a session_id is given.
    """
    try:
        result = await assistant.process_message(
            request.message,
            request.user_id,
            embedding=request.embedding,
            history=request.chat_history,
        )
    except InvalidInputError as e:
        raise e.to_http_exception()
    except Exception:
        logger.exception("Chat processing failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Chat processing failed",
        )

    if request.session_id:
        background_tasks.add_task(
            save_turn_in_background,
            request.session_id,
            request.user_id,
            request.message,
            result,
            bind=session.get_bind(),
        )

    return ChatResponse(
        response=result.answer,
        agent_used=AGENT_NAME,
        sources=[
            SourceItem(
                note=NoteResponse.from_note(s.note),
                similarity=s.similarity,
                search_mode=s.mode,
            )
            for s in result.sources
        ],
        metadata=ChatMetadata(
            memory_count=result.memory_count,
            search_performed=result.search_performed,
        ),
    )
