"""
Pydantic models for bookings.

``BookingCreate`` mirrors the booking wizard: step one picks a date and
a time slot, step two collects the customer's name, phone, location and
optional notes.  Every field is optional at the schema level so that an
incomplete form is reported with a localized "required fields" message
rather than a raw validation error.
"""

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, Field


BookingStatus = Literal["pending", "confirmed", "cancelled", "completed"]


class BookingCreate(BaseModel):
    """Schema for creating a booking."""

    booking_date: Optional[date] = Field(None, examples=["2026-10-20"])
    start_time: Optional[str] = Field(None, examples=["09:00"])
    end_time: Optional[str] = None
    customer_name: str = ""
    customer_phone: str = Field("", examples=["0551234567"])
    customer_location: str = ""
    notes: Optional[str] = None


class BookingServiceSummary(BaseModel):
    id: int
    title: str
    category: str
    price_fixed: Optional[float] = None
    price_per_hour: Optional[float] = None
    price_label: str


class BookingParty(BaseModel):
    full_name: str
    phone: Optional[str] = None


class BookingRead(BaseModel):
    id: int
    service_id: int
    customer_id: int
    provider_id: int
    booking_date: date
    start_time: str
    end_time: Optional[str] = None
    status: BookingStatus
    status_label: str
    customer_name: str
    customer_phone: str
    customer_location: str
    notes: Optional[str] = None
    created_at: str
    updated_at: Optional[str] = None
    service: Optional[BookingServiceSummary] = None
    provider: Optional[BookingParty] = None
    has_review: bool = False

    model_config = {
        "from_attributes": True,
    }


class WhatsAppLink(BaseModel):
    """Deep link that opens WhatsApp with the booking details pre-filled."""

    url: str
    phone: str
    message: str
