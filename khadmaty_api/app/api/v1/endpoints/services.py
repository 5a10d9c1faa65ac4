"""
Service listing endpoints for API v1.

Public routes search the catalog and show a service.  Providers manage
their own listings: create, edit, activate or deactivate, delete, and
upload or remove the listing image.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Path, Query, UploadFile, status

from khadmaty_api.app.core.config import settings
from khadmaty_api.app.core.security import require_roles
from khadmaty_api.app.schemas.listing import (
    ImageUploadResponse,
    ServiceCreate,
    ServiceFilters,
    ServiceRead,
    ServiceUpdate,
    SortOption,
)
from khadmaty_api.app.services.listing_service import ListingService
from khadmaty_api.app.services.storage_service import StorageService


router = APIRouter()


@router.get("/", response_model=List[ServiceRead])
async def search_services(
    category: Optional[str] = Query(None, description="Category id, e.g. plumber"),
    q: Optional[str] = Query(None, description="Free text search"),
    price_min: float = Query(0, ge=0),
    price_max: Optional[float] = Query(None, ge=0),
    min_rating: float = Query(0, ge=0, le=5),
    online_only: bool = False,
    sort_by: SortOption = "newest",
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> List[ServiceRead]:
    """Search active services.

    Results can be filtered by category, text, price range, minimum
    rating and online delivery, and sorted by ``newest``,
    ``price_asc``, ``price_desc`` or ``rating``.
    """
    filters = ServiceFilters(
        category=category,
        q=q,
        price_min=price_min,
        price_max=price_max,
        min_rating=min_rating,
        online_only=online_only,
        sort_by=sort_by,
        limit=limit,
        offset=offset,
    )
    return await ListingService.search_services(filters)


@router.get("/mine", response_model=List[ServiceRead])
async def list_my_services(current_user: dict = Depends(require_roles("provider"))) -> List[ServiceRead]:
    return await ListingService.list_provider_services(current_user["user_id"])


@router.post("/", response_model=ServiceRead, status_code=status.HTTP_201_CREATED)
async def create_service(
    data: ServiceCreate,
    current_user: dict = Depends(require_roles("provider")),
) -> ServiceRead:
    return await ListingService.create_service(current_user["user_id"], data)


@router.get("/{service_id}", response_model=ServiceRead)
async def get_service(service_id: int = Path(..., description="ID of the service")) -> ServiceRead:
    return await ListingService.get_service(service_id)


@router.put("/{service_id}", response_model=ServiceRead)
async def update_service(
    data: ServiceUpdate,
    service_id: int = Path(..., description="ID of the service"),
    current_user: dict = Depends(require_roles("provider")),
) -> ServiceRead:
    """Update a listing owned by the current provider.

    Only the fields present in the body change; send ``is_active`` to
    toggle visibility in search.
    """
    return await ListingService.update_service(service_id, current_user["user_id"], data)


@router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_service(
    service_id: int = Path(..., description="ID of the service"),
    current_user: dict = Depends(require_roles("provider")),
) -> None:
    await ListingService.delete_service(service_id, current_user["user_id"])


@router.post("/{service_id}/image", response_model=ImageUploadResponse)
async def upload_service_image(
    service_id: int = Path(..., description="ID of the service"),
    file: UploadFile = File(...),
    current_user: dict = Depends(require_roles("provider")),
) -> ImageUploadResponse:
    """Upload the listing image (up to 5 MiB)."""
    provider_id = current_user["user_id"]
    await ListingService.check_owner(service_id, provider_id)
    content = await file.read()
    url = StorageService.save_image(
        content,
        file.content_type,
        folder=str(provider_id),
        max_bytes=settings.max_service_image_bytes,
    )
    await ListingService.set_image(service_id, provider_id, url)
    return ImageUploadResponse(image_url=url)


@router.delete("/{service_id}/image", response_model=ServiceRead)
async def remove_service_image(
    service_id: int = Path(..., description="ID of the service"),
    current_user: dict = Depends(require_roles("provider")),
) -> ServiceRead:
    return await ListingService.set_image(service_id, current_user["user_id"], None)
