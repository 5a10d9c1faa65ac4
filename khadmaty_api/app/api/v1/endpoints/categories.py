"""Category catalog endpoint for API v1."""

from typing import List

from fastapi import APIRouter

from khadmaty_api.app.schemas.listing import CategoryRead
from khadmaty_api.app.services.listing_service import ListingService


router = APIRouter()


@router.get("/", response_model=List[CategoryRead])
async def list_categories() -> List[CategoryRead]:
    """Return the eight service categories with their active service counts."""
    return await ListingService.list_categories()
