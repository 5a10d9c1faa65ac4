"""
Review endpoints for API v1.

Customers review completed bookings; anyone can read the reviews of a
service together with its rating summary.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status

from khadmaty_api.app.core.security import get_current_user
from khadmaty_api.app.schemas.review import ReviewCreate, ReviewRead, ServiceReviews
from khadmaty_api.app.services.review_service import ReviewService


router = APIRouter()


@router.post(
    "/bookings/{booking_id}/review",
    response_model=ReviewRead,
    status_code=status.HTTP_201_CREATED,
)
async def add_review(
    review: ReviewCreate,
    booking_id: int = Path(..., description="ID of the completed booking"),
    current_user: dict = Depends(get_current_user),
) -> ReviewRead:
    """Rate a completed booking from 1 to 5 with an optional comment.

    A booking can be reviewed once, by the customer who made it.
    """
    return await ReviewService.create_review(booking_id, current_user["user_id"], review)


@router.get("/services/{service_id}/reviews", response_model=ServiceReviews)
async def list_service_reviews(
    service_id: int = Path(..., description="ID of the service"),
    wilaya: Optional[str] = Query(None, description="Only list reviews from this wilaya code"),
) -> ServiceReviews:
    return await ReviewService.service_reviews(service_id, wilaya)
