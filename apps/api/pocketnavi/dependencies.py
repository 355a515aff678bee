from fastapi import HTTPException, Request, status

from pocketnavi.services import SearchService


def get_search_service(request: Request) -> SearchService:
    """Service built in the app lifespan; 503 until startup has finished."""
    service = getattr(request.app.state, "search_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Search service not ready",
        )
    return service
