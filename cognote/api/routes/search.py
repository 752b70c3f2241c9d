"""Search endpoints."""

from fastapi import APIRouter

from cognote.api.deps import SessionDep
from cognote.schemas.note import NoteResponse
from cognote.schemas.search import SearchRequest, SearchResponse, SearchResultItem
from cognote.services.search_service import SearchQuery, SearchService

router = APIRouter(prefix="/api", tags=["search"])


@router.post("/search", response_model=SearchResponse)
def hybrid_search(request: SearchRequest, session: SessionDep) -> SearchResponse:
    """
    Search notes by vector similarity, falling back to text matching.

    Lexical results carry placeholder scores, not relevance.
    """
    search_service = SearchService(session)
    results = search_service.search(
        SearchQuery(
            user_id=request.user_id,
            text=request.query,
            embedding=request.embedding,
            excluded_ids=request.exclude_ids,
            limit=request.limit,
            threshold=request.threshold,
            category=request.category,
            tag=request.tag,
        )
    )

    search_type = results[0].mode if results else "empty"
    return SearchResponse(
        results=[
            SearchResultItem(
                note=NoteResponse.from_note(r.note),
                similarity=r.similarity,
                search_mode=r.mode,
            )
            for r in results
        ],
        search_type=search_type,
        count=len(results),
    )
