"""
Field rules shared by the booking wizard, service dialogs and settings.

Each helper either returns the cleaned value or raises
``InvalidInputError`` with the message key the client displays.
"""

import re
from typing import Optional

from .errors import InvalidInputError


# Local mobile numbers: ten digits starting with 05, 06 or 07.
PHONE_PATTERN = re.compile(r"^0[567][0-9]{8}$")
TIME_PATTERN = re.compile(r"^([01][0-9]|2[0-3]):([0-5][0-9])(:[0-5][0-9])?$")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def is_valid_phone(value: str) -> bool:
    return bool(PHONE_PATTERN.match(value))


def clean_text(value: Optional[str]) -> Optional[str]:
    """Strip ``value``; blank strings become ``None``."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def validate_phone(value: Optional[str], required: bool = False) -> Optional[str]:
    """Return the trimmed phone number, ``None`` when blank and optional."""
    phone = clean_text(value)
    if phone is None:
        if required:
            raise InvalidInputError("required_fields")
        return None
    # Spaces are common when numbers are typed as "05 51 23 45 67".
    phone = phone.replace(" ", "")
    if not is_valid_phone(phone):
        raise InvalidInputError("invalid_phone")
    return phone


def validate_email(value: str) -> str:
    email = value.strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise InvalidInputError("invalid_email")
    return email


def parse_time(value: Optional[str]) -> str:
    """Normalise ``HH:MM`` or ``HH:MM:SS`` to ``HH:MM``."""
    if value is None or not TIME_PATTERN.match(value.strip()):
        raise InvalidInputError("invalid_time")
    return value.strip()[:5]


def check_length(value: Optional[str], limit: int, key: str) -> Optional[str]:
    if value is not None and len(value) > limit:
        raise InvalidInputError(key)
    return value


def _format_amount(amount: float) -> str:
    if float(amount).is_integer():
        return str(int(amount))
    return f"{amount:.2f}".rstrip("0").rstrip(".")


def price_label(price_fixed: Optional[float], price_per_hour: Optional[float]) -> str:
    """Human readable price in Algerian dinars; the fixed price wins."""
    if price_fixed:
        return f"{_format_amount(price_fixed)} د.ج"
    if price_per_hour:
        return f"{_format_amount(price_per_hour)} د.ج/ساعة"
    return "اتصل للسعر"
