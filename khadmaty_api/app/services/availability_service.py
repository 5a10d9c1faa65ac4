"""
Business logic for weekly availability and bookable slots.

Availability is stored as one row per time slot (``service_id``,
``day_of_week``, ``start_time``, ``end_time``).  The editor always
saves the whole week: existing rows are deleted and the slots of every
available day are inserted again.  Days use 0 for Sunday through 6 for
Saturday.
"""

import logging
from datetime import date, timedelta
from typing import Dict, List, Optional

from khadmaty_api.app.core.config import settings
from khadmaty_api.app.core.db import get_connection
from khadmaty_api.app.core.errors import InvalidInputError, NotFoundError
from khadmaty_api.app.core.i18n import day_label
from khadmaty_api.app.core.validators import parse_time
from khadmaty_api.app.schemas.availability import (
    DEFAULT_SLOT_END,
    DEFAULT_SLOT_START,
    BookingDate,
    DayAvailability,
    DayAvailabilityRead,
    TimeSlot,
)
from khadmaty_api.app.services.listing_service import fetch_owned_service


HELD_STATUSES = ("pending", "confirmed")


def day_of_week(value: date) -> int:
    """Weekday index with Sunday as 0."""
    return (value.weekday() + 1) % 7


def times_overlap(start_a: str, end_a: Optional[str], start_b: str, end_b: Optional[str]) -> bool:
    """Whether two ``HH:MM`` ranges on the same day overlap.

    A range without an end is a single point in time.  Ranges that only
    touch (one ends when the other starts) do not overlap.
    """
    if start_a == start_b:
        return True
    return start_a < (end_b or start_b) and start_b < (end_a or start_a)


def _validate_day(day: DayAvailability) -> List[TimeSlot]:
    slots = []
    for slot in day.slots:
        start = parse_time(slot.start_time)
        end = parse_time(slot.end_time)
        if start >= end:
            raise InvalidInputError("invalid_slot")
        slots.append(TimeSlot(start_time=start, end_time=end))
    slots.sort(key=lambda s: s.start_time)
    for previous, current in zip(slots, slots[1:]):
        if current.start_time < previous.end_time:
            raise InvalidInputError("overlapping_slots", day=day.day_of_week)
    return slots


class AvailabilityService:
    """Service for the availability editor and booking slot lookups."""

    @classmethod
    def _load(cls, service_id: int) -> Dict[int, List[TimeSlot]]:
        conn = get_connection()
        try:
            service = conn.execute("SELECT id FROM services WHERE id = ?", (service_id,)).fetchone()
            if not service:
                raise NotFoundError("service_not_found", service_id=service_id)
            rows = conn.execute(
                "SELECT day_of_week, start_time, end_time FROM availability "
                "WHERE service_id = ? AND is_available = 1 ORDER BY day_of_week, start_time",
                (service_id,),
            ).fetchall()
        finally:
            conn.close()
        grouped: Dict[int, List[TimeSlot]] = {}
        for row in rows:
            grouped.setdefault(row["day_of_week"], []).append(
                TimeSlot(start_time=row["start_time"], end_time=row["end_time"])
            )
        return grouped

    @classmethod
    async def get_availability(cls, service_id: int, lang: str = "ar") -> List[DayAvailabilityRead]:
        """Return all seven days; days without rows are off with a 09:00-17:00 slot."""
        grouped = cls._load(service_id)
        week = []
        for day in range(7):
            slots = grouped.get(day)
            week.append(
                DayAvailabilityRead(
                    day_of_week=day,
                    label=day_label(day, lang),
                    is_available=bool(slots),
                    slots=slots or [TimeSlot(start_time=DEFAULT_SLOT_START, end_time=DEFAULT_SLOT_END)],
                )
            )
        return week

    @classmethod
    async def save_availability(
        cls,
        service_id: int,
        provider_id: int,
        days: List[DayAvailability],
        lang: str = "ar",
    ) -> List[DayAvailabilityRead]:
        """Replace the service's weekly availability.

        Slots of days switched off are validated but not stored.  Raises
        ``InvalidInputError`` for malformed times, empty or reversed
        slots, overlapping slots or a day listed twice.
        """
        seen = set()
        records = []
        for day in days:
            if day.day_of_week in seen:
                raise InvalidInputError("duplicate_day", day=day.day_of_week)
            seen.add(day.day_of_week)
            slots = _validate_day(day)
            if day.is_available:
                records.extend(
                    (service_id, day.day_of_week, slot.start_time, slot.end_time) for slot in slots
                )

        conn = get_connection()
        try:
            cursor = conn.cursor()
            fetch_owned_service(cursor, service_id, provider_id)
            cursor.execute("DELETE FROM availability WHERE service_id = ?", (service_id,))
            if records:
                cursor.executemany(
                    "INSERT INTO availability (service_id, day_of_week, start_time, end_time, is_available) "
                    "VALUES (?, ?, ?, ?, 1)",
                    records,
                )
            conn.commit()
        finally:
            conn.close()
        logging.getLogger(__name__).info(
            "Saved %d availability slots for service %s", len(records), service_id
        )
        return await cls.get_availability(service_id, lang)

    @classmethod
    async def booking_dates(
        cls, service_id: int, today: Optional[date] = None, lang: str = "ar"
    ) -> List[BookingDate]:
        """The next ``booking_window_days`` days starting today.

        When the provider has not configured a schedule every day is
        bookable; otherwise only days with at least one slot are.
        """
        grouped = cls._load(service_id)
        start = today or date.today()
        dates = []
        for offset in range(settings.booking_window_days):
            current = start + timedelta(days=offset)
            dow = day_of_week(current)
            dates.append(
                BookingDate(
                    date=current,
                    day_of_week=dow,
                    label=day_label(dow, lang),
                    is_available=not grouped or dow in grouped,
                )
            )
        return dates

    @classmethod
    async def open_slots(cls, service_id: int, booking_date: date) -> List[TimeSlot]:
        """Configured slots for the date's weekday not overlapped by a held booking."""
        slots = cls._load(service_id).get(day_of_week(booking_date), [])
        if not slots:
            return []
        conn = get_connection()
        try:
            rows = conn.execute(
                "SELECT start_time, end_time FROM bookings WHERE service_id = ? AND booking_date = ? "
                "AND status IN (?, ?)",
                (service_id, booking_date.isoformat(), *HELD_STATUSES),
            ).fetchall()
        finally:
            conn.close()
        return [
            slot
            for slot in slots
            if not any(
                times_overlap(slot.start_time, slot.end_time, row["start_time"], row["end_time"])
                for row in rows
            )
        ]
