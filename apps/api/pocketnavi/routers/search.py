from fastapi import APIRouter, Depends, Query, Request

from pocketnavi.core import get_settings, limiter
from pocketnavi.dependencies import get_search_service
from pocketnavi.schemas import SearchPageResponse
from pocketnavi.services import SearchService

router = APIRouter(tags=["search"])


@router.get("/search", response_model=SearchPageResponse)
@limiter.limit(lambda: get_settings().search_rate_limit)
async def search(
    request: Request,
    q: str = Query("", max_length=200),
    page: int = Query(1),
    service: SearchService = Depends(get_search_service),
):
    """Building search. Store failures degrade to fewer (or zero) results, never an error."""
    return await service.search_page(q, page)
