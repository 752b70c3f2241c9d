"""Memory CRUD endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from cognote.api.deps import NoteServiceDep, TenantDep
from cognote.schemas.note import (
    NoteCreate,
    NoteListResponse,
    NoteResponse,
    NoteUpdate,
    TagsResponse,
)
from cognote.utils.exceptions import InvalidInputError, NotFoundError

router = APIRouter(prefix="/api", tags=["memories"])


@router.post(
    "/memories", response_model=NoteResponse, status_code=status.HTTP_201_CREATED
)
async def create_memory(data: NoteCreate, note_service: NoteServiceDep) -> NoteResponse:
    """
    Create a memory.

    A valid 384-dimension client embedding is stored as-is; otherwise the
    server embeds the note. Without a summary, one is generated.
    """
    try:
        note = await note_service.create_note(data)
    except InvalidInputError as e:
        raise e.to_http_exception()
    return NoteResponse.from_note(note)


@router.get("/memories", response_model=NoteListResponse)
def list_memories(
    user_id: TenantDep,
    note_service: NoteServiceDep,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
    category: str | None = None,
    memory_type: str | None = None,
) -> NoteListResponse:
    """
    List memories for the user with pagination.

    Optionally filtered by category and memory type.
    """
    notes, total = note_service.list_notes(
        user_id,
        skip=skip,
        limit=limit,
        category=category,
        memory_type=memory_type,
    )
    return NoteListResponse(
        notes=[NoteResponse.from_note(n) for n in notes],
        total=total,
    )


@router.get("/memories/tags", response_model=TagsResponse)
def list_tags(user_id: TenantDep, note_service: NoteServiceDep) -> TagsResponse:
    """Unique tags used across the user's memories."""
    return TagsResponse(tags=note_service.list_tags(user_id))


@router.get("/memories/{note_id}", response_model=NoteResponse)
def get_memory(
    note_id: str, user_id: TenantDep, note_service: NoteServiceDep
) -> NoteResponse:
    """
    Get a single memory by ID.
    """
    try:
        return NoteResponse.from_note(note_service.get_note(note_id, user_id))
    except NotFoundError as e:
        raise e.to_http_exception()


@router.patch("/memories/{note_id}", response_model=NoteResponse)
async def update_memory(
    note_id: str,
    data: NoteUpdate,
    user_id: TenantDep,
    note_service: NoteServiceDep,
) -> NoteResponse:
    """
    Update a memory.

    If the title, content or tags change the embedding is recomputed.
    """
    try:
        note = await note_service.update_note(note_id, user_id, data)
        return NoteResponse.from_note(note)
    except NotFoundError as e:
        raise e.to_http_exception()
    except InvalidInputError as e:
        raise e.to_http_exception()


@router.delete("/memories/{note_id}")
def delete_memory(
    note_id: str, user_id: TenantDep, note_service: NoteServiceDep
) -> dict:
    """
    Delete a memory.
    """
    try:
        note_service.delete_note(note_id, user_id)
        return {"success": True, "message": "Memory deleted successfully"}
    except NotFoundError as e:
        raise e.to_http_exception()
