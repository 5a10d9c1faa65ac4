"""
Availability endpoints for API v1.

Providers edit a weekly schedule per service.  Customers read the next
bookable dates and the open slots of a chosen date while going through
the booking wizard.
"""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Path, Query

from khadmaty_api.app.core.i18n import get_language
from khadmaty_api.app.core.security import require_roles
from khadmaty_api.app.schemas.availability import (
    AvailabilityUpdate,
    BookingDate,
    DayAvailabilityRead,
    TimeSlot,
)
from khadmaty_api.app.services.availability_service import AvailabilityService


router = APIRouter()


@router.get("/services/{service_id}/availability", response_model=List[DayAvailabilityRead])
async def get_availability(
    service_id: int = Path(..., description="ID of the service"),
    lang: str = Depends(get_language),
) -> List[DayAvailabilityRead]:
    """Return the seven days of the week, Sunday first."""
    return await AvailabilityService.get_availability(service_id, lang)


@router.put("/services/{service_id}/availability", response_model=List[DayAvailabilityRead])
async def save_availability(
    data: AvailabilityUpdate,
    service_id: int = Path(..., description="ID of the service"),
    current_user: dict = Depends(require_roles("provider")),
    lang: str = Depends(get_language),
) -> List[DayAvailabilityRead]:
    """Replace the weekly schedule of a service owned by the current provider."""
    return await AvailabilityService.save_availability(
        service_id, current_user["user_id"], data.days, lang
    )


@router.get("/services/{service_id}/booking-dates", response_model=List[BookingDate])
async def booking_dates(
    service_id: int = Path(..., description="ID of the service"),
    lang: str = Depends(get_language),
) -> List[BookingDate]:
    return await AvailabilityService.booking_dates(service_id, lang=lang)


@router.get("/services/{service_id}/slots", response_model=List[TimeSlot])
async def open_slots(
    service_id: int = Path(..., description="ID of the service"),
    booking_date: date = Query(..., alias="date", description="Date in YYYY-MM-DD format"),
) -> List[TimeSlot]:
    """Slots of the date's weekday that no pending or confirmed booking holds."""
    return await AvailabilityService.open_slots(service_id, booking_date)
