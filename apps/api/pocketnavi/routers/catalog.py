import logging

from fastapi import APIRouter, Depends, HTTPException, status

from pocketnavi.dependencies import get_search_service
from pocketnavi.providers import RecordNotFound, StoreError
from pocketnavi.schemas import ArchitectResponse, BuildingDetailResponse
from pocketnavi.serializers import architect_to_response, building_to_detail_response
from pocketnavi.services import SearchService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["catalog"])


@router.get("/buildings/{slug}", response_model=BuildingDetailResponse)
async def get_building(slug: str, service: SearchService = Depends(get_search_service)):
    try:
        building = await service.get_building(slug)
    except RecordNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Building not found")
    except StoreError as e:
        logger.warning("Building lookup failed slug=%s: %s", slug, e)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Store unavailable")
    return building_to_detail_response(building)


@router.get("/architects/{slug}", response_model=ArchitectResponse)
async def get_architect(slug: str, service: SearchService = Depends(get_search_service)):
    try:
        architect = await service.get_architect(slug)
    except RecordNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Architect not found")
    except StoreError as e:
        logger.warning("Architect lookup failed slug=%s: %s", slug, e)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Store unavailable")
    return architect_to_response(architect)
