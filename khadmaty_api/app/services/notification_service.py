"""
In-app notifications.

Booking and review operations call ``notify`` with their own cursor so
the notification is committed together with the change it reports.
The remaining methods back the notification bell: listing, the unread
badge and marking items as read.
"""

import logging
import sqlite3
from typing import List, Optional

from khadmaty_api.app.core.db import get_connection
from khadmaty_api.app.core.errors import NotFoundError
from khadmaty_api.app.schemas.notification import NotificationRead


# kind -> (title, body template)
TEMPLATES = {
    "booking_created": ("حجز جديد", "لديك طلب حجز جديد لخدمة {service} يوم {date} على الساعة {time}"),
    "booking_confirmed": ("تم تأكيد حجزك", "أكد مقدم الخدمة حجزك لخدمة {service} يوم {date} على الساعة {time}"),
    "booking_rejected": ("تم رفض حجزك", "اعتذر مقدم الخدمة عن حجزك لخدمة {service} يوم {date}"),
    "booking_completed": ("اكتملت الخدمة", "تم إكمال خدمة {service}، يمكنك الآن تقييمها"),
    "booking_cancelled": ("تم إلغاء حجز", "ألغى العميل حجز خدمة {service} يوم {date}"),
    "review_received": ("تقييم جديد", "حصلت خدمة {service} على تقييم {rating} من 5"),
}


def _row_to_notification(row: sqlite3.Row) -> NotificationRead:
    return NotificationRead(
        id=row["id"],
        booking_id=row["booking_id"],
        kind=row["kind"],
        title=row["title"],
        body=row["body"],
        is_read=bool(row["is_read"]),
        created_at=str(row["created_at"]),
    )


def notify(
    cursor: sqlite3.Cursor,
    user_id: int,
    kind: str,
    booking_id: Optional[int] = None,
    **params,
) -> None:
    """Queue a notification of ``kind`` for ``user_id`` on the caller's transaction."""
    title, template = TEMPLATES[kind]
    cursor.execute(
        "INSERT INTO notifications (user_id, booking_id, kind, title, body) VALUES (?, ?, ?, ?, ?)",
        (user_id, booking_id, kind, title, template.format(**params)),
    )
    logging.getLogger(__name__).debug("Notification %s queued for user %s", kind, user_id)


class NotificationService:
    """Service for reading and acknowledging notifications."""

    @classmethod
    async def list_notifications(cls, user_id: int, unread_only: bool = False) -> List[NotificationRead]:
        sql = "SELECT * FROM notifications WHERE user_id = ?"
        if unread_only:
            sql += " AND is_read = 0"
        sql += " ORDER BY created_at DESC, id DESC"
        conn = get_connection()
        try:
            rows = conn.execute(sql, (user_id,)).fetchall()
        finally:
            conn.close()
        return [_row_to_notification(row) for row in rows]

    @classmethod
    async def unread_count(cls, user_id: int) -> int:
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT COUNT(*) AS total FROM notifications WHERE user_id = ? AND is_read = 0",
                (user_id,),
            ).fetchone()
        finally:
            conn.close()
        return row["total"]

    @classmethod
    async def mark_read(cls, notification_id: int, user_id: int) -> NotificationRead:
        """Mark one notification as read.

        Notifications belonging to someone else are reported as missing.
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE notifications SET is_read = 1 WHERE id = ? AND user_id = ?",
                (notification_id, user_id),
            )
            if cursor.rowcount == 0:
                raise NotFoundError("notification_not_found", notification_id=notification_id)
            conn.commit()
            row = cursor.execute("SELECT * FROM notifications WHERE id = ?", (notification_id,)).fetchone()
        finally:
            conn.close()
        return _row_to_notification(row)

    @classmethod
    async def mark_all_read(cls, user_id: int) -> int:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE notifications SET is_read = 1 WHERE user_id = ? AND is_read = 0",
                (user_id,),
            )
            updated = cursor.rowcount
            conn.commit()
        finally:
            conn.close()
        return updated
