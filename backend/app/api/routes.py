
from fastapi import APIRouter, HTTPException, Depends, Query
from typing import Optional
import logging
from app.config import settings
from app.models.health_model import HealthResponse
from app.models.search_model import ErrorResponse, SearchQuery, SearchResponse
from app.services.search import SearchService, UpstreamSearchFailure
from app.services.soundcloud import SoundCloudClient
from app.utils.params import normalize_limit, parse_requested_limit, validate_query

logger = logging.getLogger(__name__)

router = APIRouter()

soundcloud_client: Optional[SoundCloudClient] = None
search_service: Optional[SearchService] = None


def get_search_service() -> SearchService:
    if search_service is None:
        raise HTTPException(status_code=503, detail="Search service not initialized")
    return search_service


@router.get("/api/health", response_model=HealthResponse)
async def health_check():
    client_ready = soundcloud_client is not None and search_service is not None

    return HealthResponse(
        status="healthy" if client_ready else "unhealthy",
        client_ready=client_ready,
    )


@router.get(
    "/search",
    response_model=SearchResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def search_tracks(
    q: Optional[str] = Query(None, description="Search text"),
    limit: Optional[str] = Query(None, description="Number of results"),
    search_svc: SearchService = Depends(get_search_service),
):
    text = validate_query(q)
    requested_limit = parse_requested_limit(limit)
    processed_limit = normalize_limit(requested_limit, search_svc.default_limit, search_svc.max_limit)
    query = SearchQuery(text=text, limit=processed_limit)

    try:
        results = await search_svc.search(query)

    except UpstreamSearchFailure:
        raise

    except Exception as e:
        raise UpstreamSearchFailure(f"Unexpected error while searching '{text}': {str(e)}") from e

    message = None
    if not results:
        message = f"No tracks found for '{text}'."

    logger.info(f"Search '{text}' completed with {len(results)} results (limit {processed_limit})")

    return SearchResponse(
        query=text,
        requested_limit=requested_limit,
        processed_limit=processed_limit,
        actual_result_count=len(results),
        developer=settings.DEVELOPER,
        message=message,
        results=results,
    )
