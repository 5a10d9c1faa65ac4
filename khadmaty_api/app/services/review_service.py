"""
Business logic for reviews.

A customer may review a booking once it is ``completed``; each booking
gets at most one review.  Review pages aggregate ratings per service
and break them down by the reviewers' wilaya.
"""

import logging
import sqlite3
from typing import List, Optional

from khadmaty_api.app.core.db import get_connection
from khadmaty_api.app.core.errors import ConflictError, InvalidInputError, NotFoundError, PermissionDeniedError
from khadmaty_api.app.core.validators import check_length, clean_text
from khadmaty_api.app.data.wilayas import get_wilaya_name
from khadmaty_api.app.schemas.review import ReviewCreate, ReviewRead, Reviewer, ServiceReviews, WilayaStat
from khadmaty_api.app.services.notification_service import notify


REVIEW_SELECT = """
    SELECT r.*, u.full_name, u.avatar_url, u.wilaya
    FROM reviews r
    JOIN users u ON u.id = r.customer_id
"""


def _row_to_review(row: sqlite3.Row) -> ReviewRead:
    return ReviewRead(
        id=row["id"],
        booking_id=row["booking_id"],
        service_id=row["service_id"],
        provider_id=row["provider_id"],
        customer_id=row["customer_id"],
        rating=row["rating"],
        comment=row["comment"],
        created_at=str(row["created_at"]),
        customer=Reviewer(
            full_name=row["full_name"],
            avatar_url=row["avatar_url"],
            wilaya=row["wilaya"],
            wilaya_name=get_wilaya_name(row["wilaya"]) if row["wilaya"] else None,
        ),
    )


class ReviewService:
    """Service for creating and listing reviews."""

    @classmethod
    async def create_review(cls, booking_id: int, customer_id: int, data: ReviewCreate) -> ReviewRead:
        """Review a completed booking and notify the provider.

        Raises ``InvalidInputError`` for a rating outside 1-5 or a
        comment over 500 characters, ``NotFoundError`` for an unknown
        booking, ``PermissionDeniedError`` when the caller is not the
        booking's customer, and ``ConflictError`` when the booking is
        not completed or already reviewed.
        """
        if not 1 <= data.rating <= 5:
            raise InvalidInputError("rating_required")
        comment = check_length(clean_text(data.comment), 500, "comment_too_long")

        conn = get_connection()
        try:
            cursor = conn.cursor()
            booking = cursor.execute(
                "SELECT b.id, b.service_id, b.provider_id, b.customer_id, b.status, s.title "
                "FROM bookings b JOIN services s ON s.id = b.service_id WHERE b.id = ?",
                (booking_id,),
            ).fetchone()
            if not booking:
                raise NotFoundError("booking_not_found", booking_id=booking_id)
            if booking["customer_id"] != customer_id:
                raise PermissionDeniedError("not_booking_participant")
            if booking["status"] != "completed":
                raise ConflictError("review_not_allowed")
            try:
                cursor.execute(
                    """
                    INSERT INTO reviews (booking_id, service_id, provider_id, customer_id, rating, comment)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        booking_id,
                        booking["service_id"],
                        booking["provider_id"],
                        customer_id,
                        data.rating,
                        comment,
                    ),
                )
            except sqlite3.IntegrityError:
                raise ConflictError("review_exists")
            review_id = cursor.lastrowid
            notify(
                cursor,
                booking["provider_id"],
                "review_received",
                booking_id=booking_id,
                service=booking["title"],
                rating=data.rating,
            )
            conn.commit()
            row = cursor.execute(REVIEW_SELECT + " WHERE r.id = ?", (review_id,)).fetchone()
        finally:
            conn.close()
        logging.getLogger(__name__).info(
            "Review %s (%s stars) added for booking %s", review_id, data.rating, booking_id
        )
        return _row_to_review(row)

    @classmethod
    async def service_reviews(cls, service_id: int, wilaya: Optional[str] = None) -> ServiceReviews:
        """Rating summary and reviews of a service.

        The ``wilaya`` filter narrows the review list only; the average,
        total and per-wilaya figures always cover every review.
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if not cursor.execute("SELECT 1 FROM services WHERE id = ?", (service_id,)).fetchone():
                raise NotFoundError("service_not_found", service_id=service_id)
            summary = cursor.execute(
                "SELECT COALESCE(AVG(rating), 0) AS avg_rating, COUNT(*) AS total "
                "FROM reviews WHERE service_id = ?",
                (service_id,),
            ).fetchone()
            stat_rows = cursor.execute(
                """
                SELECT u.wilaya AS wilaya, COUNT(*) AS total, AVG(r.rating) AS avg_rating
                FROM reviews r JOIN users u ON u.id = r.customer_id
                WHERE r.service_id = ? AND u.wilaya IS NOT NULL
                GROUP BY u.wilaya
                ORDER BY total DESC, u.wilaya
                """,
                (service_id,),
            ).fetchall()
            sql = REVIEW_SELECT + " WHERE r.service_id = ?"
            params: list = [service_id]
            if wilaya:
                sql += " AND u.wilaya = ?"
                params.append(wilaya)
            sql += " ORDER BY r.created_at DESC, r.id DESC"
            rows = cursor.execute(sql, tuple(params)).fetchall()
        finally:
            conn.close()
        wilayas: List[WilayaStat] = [
            WilayaStat(
                wilaya=row["wilaya"],
                name=get_wilaya_name(row["wilaya"]),
                count=row["total"],
                avg_rating=round(row["avg_rating"], 2),
            )
            for row in stat_rows
        ]
        return ServiceReviews(
            service_id=service_id,
            average_rating=round(summary["avg_rating"], 2),
            total_reviews=summary["total"],
            wilayas=wilayas,
            reviews=[_row_to_review(row) for row in rows],
        )
