"""
Pydantic models for weekly availability.

Availability is edited per service as seven days (0 = Sunday .. 6 =
Saturday), each switched on or off and holding one or more
``HH:MM`` time slots.
"""

import datetime
from typing import List

from pydantic import BaseModel, Field


DEFAULT_SLOT_START = "09:00"
DEFAULT_SLOT_END = "17:00"


class TimeSlot(BaseModel):
    start_time: str = Field(DEFAULT_SLOT_START, examples=["09:00"])
    end_time: str = Field(DEFAULT_SLOT_END, examples=["17:00"])


class DayAvailability(BaseModel):
    day_of_week: int = Field(..., ge=0, le=6)
    is_available: bool = False
    slots: List[TimeSlot] = Field(default_factory=list)


class DayAvailabilityRead(DayAvailability):
    label: str


class AvailabilityUpdate(BaseModel):
    days: List[DayAvailability]


class BookingDate(BaseModel):
    """One selectable day in step one of the booking wizard."""

    date: datetime.date
    day_of_week: int
    label: str
    is_available: bool
