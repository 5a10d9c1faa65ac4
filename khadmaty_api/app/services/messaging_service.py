"""WhatsApp deep links relaying booking details."""

from typing import Optional
from urllib.parse import quote

from khadmaty_api.app.core.config import settings
from khadmaty_api.app.core.errors import NotFoundError
from khadmaty_api.app.schemas.booking import WhatsAppLink


def to_international(phone: str, country_code: Optional[str] = None) -> str:
    """Turn a local ``0XXXXXXXXX`` number into ``<country code>XXXXXXXXX``."""
    country_code = country_code or settings.whatsapp_country_code
    digits = "".join(ch for ch in phone if ch.isdigit())
    if digits.startswith("00"):
        return digits[2:]
    if digits.startswith("0"):
        return country_code + digits[1:]
    return digits


def booking_message(
    service_title: str,
    booking_date: str,
    start_time: str,
    customer_name: str,
    customer_phone: str,
    customer_location: str,
    notes: Optional[str] = None,
) -> str:
    lines = [
        "مرحباً، بخصوص الحجز التالي:",
        f"الخدمة: {service_title}",
        f"التاريخ: {booking_date}",
        f"الوقت: {start_time}",
        f"الاسم: {customer_name}",
        f"الهاتف: {customer_phone}",
        f"الموقع: {customer_location}",
    ]
    if notes:
        lines.append(f"ملاحظات: {notes}")
    return "\n".join(lines)


def build_whatsapp_link(phone: Optional[str], message: str) -> WhatsAppLink:
    if not phone:
        raise NotFoundError("no_phone")
    number = to_international(phone)
    return WhatsAppLink(
        url=f"https://wa.me/{number}?text={quote(message)}",
        phone=number,
        message=message,
    )
