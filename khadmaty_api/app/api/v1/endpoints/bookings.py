"""
Booking endpoints for API v1.

Customers submit the booking wizard for a service and cancel pending
bookings; providers accept, reject and complete the bookings they
receive.  Both sides list their bookings and can open a WhatsApp
conversation with the other party.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from khadmaty_api.app.core.i18n import get_language
from khadmaty_api.app.core.security import get_current_user, require_roles
from khadmaty_api.app.schemas.booking import BookingCreate, BookingRead, BookingStatus, WhatsAppLink
from khadmaty_api.app.services.booking_service import BookingService


router = APIRouter()


@router.post(
    "/services/{service_id}/bookings",
    response_model=BookingRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_booking(
    booking: BookingCreate,
    service_id: int = Path(..., description="ID of the service to book"),
    current_user: dict = Depends(get_current_user),
    lang: str = Depends(get_language),
) -> BookingRead:
    """Book a slot of a service.

    The booking starts as ``pending`` and the provider is notified.  A
    slot already held by a pending or confirmed booking yields 409.
    """
    return await BookingService.create_booking(service_id, current_user["user_id"], booking, lang=lang)


@router.get("/bookings/mine", response_model=List[BookingRead])
async def list_my_bookings(
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    current_user: dict = Depends(get_current_user),
    lang: str = Depends(get_language),
) -> List[BookingRead]:
    """Bookings made by the current customer or received by the current provider."""
    return await BookingService.list_bookings(current_user, status_filter, lang)


@router.get("/bookings/{booking_id}", response_model=BookingRead)
async def get_booking(
    booking_id: int = Path(..., description="ID of the booking"),
    current_user: dict = Depends(get_current_user),
    lang: str = Depends(get_language),
) -> BookingRead:
    return await BookingService.get_booking(booking_id, current_user["user_id"], lang)


@router.post("/bookings/{booking_id}/accept", response_model=BookingRead)
async def accept_booking(
    booking_id: int = Path(..., description="ID of the booking"),
    current_user: dict = Depends(require_roles("provider")),
    lang: str = Depends(get_language),
) -> BookingRead:
    return await BookingService.transition(booking_id, current_user["user_id"], "accept", lang)


@router.post("/bookings/{booking_id}/reject", response_model=BookingRead)
async def reject_booking(
    booking_id: int = Path(..., description="ID of the booking"),
    current_user: dict = Depends(require_roles("provider")),
    lang: str = Depends(get_language),
) -> BookingRead:
    return await BookingService.transition(booking_id, current_user["user_id"], "reject", lang)


@router.post("/bookings/{booking_id}/complete", response_model=BookingRead)
async def complete_booking(
    booking_id: int = Path(..., description="ID of the booking"),
    current_user: dict = Depends(require_roles("provider")),
    lang: str = Depends(get_language),
) -> BookingRead:
    return await BookingService.transition(booking_id, current_user["user_id"], "complete", lang)


@router.post("/bookings/{booking_id}/cancel", response_model=BookingRead)
async def cancel_booking(
    booking_id: int = Path(..., description="ID of the booking"),
    current_user: dict = Depends(get_current_user),
    lang: str = Depends(get_language),
) -> BookingRead:
    """Cancel a pending booking; only the customer who made it may do so."""
    return await BookingService.transition(booking_id, current_user["user_id"], "cancel", lang)


@router.get("/bookings/{booking_id}/whatsapp", response_model=WhatsAppLink)
async def whatsapp_link(
    booking_id: int = Path(..., description="ID of the booking"),
    current_user: dict = Depends(get_current_user),
) -> WhatsAppLink:
    return await BookingService.whatsapp_link(booking_id, current_user["user_id"])
