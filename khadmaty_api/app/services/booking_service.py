"""
Business logic for bookings.

The ``BookingService`` validates the two-step booking wizard, lists a
user's bookings, drives the status lifecycle and builds the WhatsApp
link used to contact the other party.  A booking holds its time range
while it is ``pending`` or ``confirmed``; a new booking may not overlap a
held one.  The unique partial index on ``bookings`` also rejects a second
booking for a held start time even when two requests race.
"""

import logging
import sqlite3
from datetime import date, timedelta
from typing import Dict, List, Optional

from khadmaty_api.app.core.config import settings
from khadmaty_api.app.core.db import get_connection
from khadmaty_api.app.core.errors import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
)
from khadmaty_api.app.core.i18n import status_label
from khadmaty_api.app.core.validators import check_length, clean_text, parse_time, price_label, validate_phone
from khadmaty_api.app.schemas.booking import (
    BookingCreate,
    BookingParty,
    BookingRead,
    BookingServiceSummary,
    WhatsAppLink,
)
from khadmaty_api.app.services.availability_service import HELD_STATUSES, day_of_week, times_overlap
from khadmaty_api.app.services.messaging_service import booking_message, build_whatsapp_link
from khadmaty_api.app.services.notification_service import notify


BOOKING_SELECT = """
    SELECT b.*, s.title AS service_title, s.category AS service_category,
           s.price_fixed, s.price_per_hour,
           p.full_name AS provider_name, p.phone AS provider_phone,
           EXISTS (SELECT 1 FROM reviews r WHERE r.booking_id = b.id) AS has_review
    FROM bookings b
    JOIN services s ON s.id = b.service_id
    JOIN users p ON p.id = b.provider_id
"""

# action -> (acting party, required status, new status, notification kind)
ACTIONS = {
    "accept": ("provider", "pending", "confirmed", "booking_confirmed"),
    "reject": ("provider", "pending", "cancelled", "booking_rejected"),
    "complete": ("provider", "confirmed", "completed", "booking_completed"),
    "cancel": ("customer", "pending", "cancelled", "booking_cancelled"),
}


def row_to_booking(row: sqlite3.Row, lang: str = "ar") -> BookingRead:
    return BookingRead(
        id=row["id"],
        service_id=row["service_id"],
        customer_id=row["customer_id"],
        provider_id=row["provider_id"],
        booking_date=row["booking_date"],
        start_time=row["start_time"],
        end_time=row["end_time"],
        status=row["status"],
        status_label=status_label(row["status"], lang),
        customer_name=row["customer_name"],
        customer_phone=row["customer_phone"],
        customer_location=row["customer_location"],
        notes=row["notes"],
        created_at=str(row["created_at"]),
        updated_at=str(row["updated_at"]) if row["updated_at"] else None,
        service=BookingServiceSummary(
            id=row["service_id"],
            title=row["service_title"],
            category=row["service_category"],
            price_fixed=row["price_fixed"],
            price_per_hour=row["price_per_hour"],
            price_label=price_label(row["price_fixed"], row["price_per_hour"]),
        ),
        provider=BookingParty(full_name=row["provider_name"], phone=row["provider_phone"]),
        has_review=bool(row["has_review"]),
    )


def _fetch_booking(cursor: sqlite3.Cursor, booking_id: int) -> sqlite3.Row:
    row = cursor.execute(BOOKING_SELECT + " WHERE b.id = ?", (booking_id,)).fetchone()
    if not row:
        raise NotFoundError("booking_not_found", booking_id=booking_id)
    return row


def _check_participant(row: sqlite3.Row, user_id: int) -> None:
    if user_id not in (row["customer_id"], row["provider_id"]):
        raise PermissionDeniedError("not_booking_participant")


def _resolve_slot(
    cursor: sqlite3.Cursor, service_id: int, booking_date: date, start_time: str, end_time: Optional[str]
) -> Optional[str]:
    """Check the start time against the weekday's slots and return the end time.

    Services without any availability rows accept any start time.  A
    booking on a configured slot always ends with the slot.
    """
    slots = cursor.execute(
        "SELECT start_time, end_time FROM availability "
        "WHERE service_id = ? AND day_of_week = ? AND is_available = 1",
        (service_id, day_of_week(booking_date)),
    ).fetchall()
    if not slots:
        has_schedule = cursor.execute(
            "SELECT 1 FROM availability WHERE service_id = ? LIMIT 1", (service_id,)
        ).fetchone()
        if has_schedule:
            raise InvalidInputError("slot_unavailable")
        return end_time
    for slot in slots:
        if slot["start_time"] == start_time:
            if end_time is not None and end_time != slot["end_time"]:
                raise InvalidInputError("slot_unavailable")
            return slot["end_time"]
    raise InvalidInputError("slot_unavailable")


def _check_slot_free(
    cursor: sqlite3.Cursor, service_id: int, booking_date: str, start_time: str, end_time: Optional[str]
) -> None:
    held = cursor.execute(
        "SELECT start_time, end_time FROM bookings WHERE service_id = ? AND booking_date = ? "
        "AND status IN (?, ?)",
        (service_id, booking_date, *HELD_STATUSES),
    ).fetchall()
    for row in held:
        if times_overlap(start_time, end_time, row["start_time"], row["end_time"]):
            raise ConflictError("slot_taken")


class BookingService:
    """Service for the booking wizard and booking lifecycle."""

    @classmethod
    async def create_booking(
        cls,
        service_id: int,
        customer_id: int,
        data: BookingCreate,
        today: Optional[date] = None,
        lang: str = "ar",
    ) -> BookingRead:
        """Create a ``pending`` booking and notify the provider.

        Raises
        ------
        NotFoundError
            The service does not exist.
        InvalidInputError
            The service is inactive, a required field is missing, the
            phone number or a time is malformed, the date is outside the
            booking window or the start time is not one of the slots.
        PermissionDeniedError
            The customer owns the service.
        ConflictError
            The requested time overlaps a held booking.
        """
        logger = logging.getLogger(__name__)
        name = clean_text(data.customer_name)
        location = clean_text(data.customer_location)
        if not data.booking_date or not clean_text(data.start_time) or not name or not location:
            raise InvalidInputError("required_fields")
        phone = validate_phone(data.customer_phone, required=True)
        notes = check_length(clean_text(data.notes), 500, "notes_too_long")
        start_time = parse_time(data.start_time)
        end_time = parse_time(data.end_time) if clean_text(data.end_time) else None
        if end_time is not None and end_time <= start_time:
            raise InvalidInputError("invalid_slot")

        first_day = today or date.today()
        last_day = first_day + timedelta(days=settings.booking_window_days - 1)
        if not first_day <= data.booking_date <= last_day:
            raise InvalidInputError("date_out_of_window", days=settings.booking_window_days)
        booking_date = data.booking_date.isoformat()

        conn = get_connection()
        try:
            cursor = conn.cursor()
            # Take the write lock before the slot check.
            cursor.execute("BEGIN IMMEDIATE")
            service = cursor.execute(
                "SELECT id, provider_id, title, is_active FROM services WHERE id = ?",
                (service_id,),
            ).fetchone()
            if not service:
                raise NotFoundError("service_not_found", service_id=service_id)
            if not service["is_active"]:
                raise InvalidInputError("service_inactive")
            if service["provider_id"] == customer_id:
                raise PermissionDeniedError("own_service")
            end_time = _resolve_slot(cursor, service_id, data.booking_date, start_time, end_time)
            _check_slot_free(cursor, service_id, booking_date, start_time, end_time)
            try:
                cursor.execute(
                    """
                    INSERT INTO bookings
                        (service_id, customer_id, provider_id, booking_date, start_time, end_time,
                         status, customer_name, customer_phone, customer_location, notes)
                    VALUES (?, ?, ?, ?, ?, ?, 'pending', ?, ?, ?, ?)
                    """,
                    (
                        service_id,
                        customer_id,
                        service["provider_id"],
                        booking_date,
                        start_time,
                        end_time,
                        name,
                        phone,
                        location,
                        notes,
                    ),
                )
            except sqlite3.IntegrityError:
                raise ConflictError("slot_taken")
            booking_id = cursor.lastrowid
            notify(
                cursor,
                service["provider_id"],
                "booking_created",
                booking_id=booking_id,
                service=service["title"],
                date=booking_date,
                time=start_time,
            )
            conn.commit()
            row = _fetch_booking(cursor, booking_id)
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()
        logger.info(
            "Booking %s created for service %s on %s %s", booking_id, service_id, booking_date, start_time
        )
        return row_to_booking(row, lang)

    @classmethod
    async def list_bookings(
        cls, user: Dict[str, object], status: Optional[str] = None, lang: str = "ar"
    ) -> List[BookingRead]:
        """Bookings the user made, plus those received for a provider, newest first."""
        if user.get("role") == "provider":
            sql = BOOKING_SELECT + " WHERE (b.customer_id = ? OR b.provider_id = ?)"
            params: list = [user["user_id"], user["user_id"]]
        else:
            sql = BOOKING_SELECT + " WHERE b.customer_id = ?"
            params = [user["user_id"]]
        if status:
            sql += " AND b.status = ?"
            params.append(status)
        sql += " ORDER BY b.created_at DESC, b.id DESC"
        conn = get_connection()
        try:
            rows = conn.execute(sql, tuple(params)).fetchall()
        finally:
            conn.close()
        return [row_to_booking(row, lang) for row in rows]

    @classmethod
    async def get_booking(cls, booking_id: int, user_id: int, lang: str = "ar") -> BookingRead:
        conn = get_connection()
        try:
            row = _fetch_booking(conn.cursor(), booking_id)
        finally:
            conn.close()
        _check_participant(row, user_id)
        return row_to_booking(row, lang)

    @classmethod
    async def transition(cls, booking_id: int, user_id: int, action: str, lang: str = "ar") -> BookingRead:
        """Apply ``action`` (accept, reject, complete or cancel) to a booking.

        Only the acting party may perform an action and only from the
        status it starts from; anything else is a conflict.  The other
        party receives a notification.
        """
        party, required, target, kind = ACTIONS[action]
        conn = get_connection()
        try:
            cursor = conn.cursor()
            row = _fetch_booking(cursor, booking_id)
            _check_participant(row, user_id)
            if row[f"{party}_id"] != user_id:
                raise PermissionDeniedError(f"{party}_only")
            cursor.execute(
                "UPDATE bookings SET status = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ? AND status = ?",
                (target, booking_id, required),
            )
            if cursor.rowcount == 0:
                raise ConflictError("invalid_transition", current=row["status"], target=target)
            recipient = row["customer_id"] if party == "provider" else row["provider_id"]
            notify(
                cursor,
                recipient,
                kind,
                booking_id=booking_id,
                service=row["service_title"],
                date=row["booking_date"],
                time=row["start_time"],
            )
            conn.commit()
            row = _fetch_booking(cursor, booking_id)
        finally:
            conn.close()
        logging.getLogger(__name__).info(
            "Booking %s: %s by user %s -> %s", booking_id, action, user_id, target
        )
        return row_to_booking(row, lang)

    @classmethod
    async def whatsapp_link(cls, booking_id: int, user_id: int) -> WhatsAppLink:
        """Link to the provider's phone for customers and the customer's phone for providers."""
        conn = get_connection()
        try:
            row = _fetch_booking(conn.cursor(), booking_id)
        finally:
            conn.close()
        _check_participant(row, user_id)
        phone = row["provider_phone"] if user_id == row["customer_id"] else row["customer_phone"]
        message = booking_message(
            row["service_title"],
            row["booking_date"],
            row["start_time"],
            row["customer_name"],
            row["customer_phone"],
            row["customer_location"],
            row["notes"],
        )
        return build_whatsapp_link(phone, message)
