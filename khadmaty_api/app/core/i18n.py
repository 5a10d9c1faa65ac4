"""
Localized user-facing messages.

Every error the API reports carries a message key; the text shown to
the user is looked up here in Arabic (the default) or English.  The
Arabic strings match what the web client displays in its toasts.
"""

from typing import Optional

from fastapi import Header

from .config import settings


SUPPORTED_LANGUAGES = ("ar", "en")

MESSAGES: dict[str, dict[str, str]] = {
    # Authentication
    "not_authenticated": {"ar": "يرجى تسجيل الدخول أولاً", "en": "Please sign in first"},
    "invalid_token": {"ar": "انتهت صلاحية الجلسة، يرجى تسجيل الدخول مجدداً", "en": "Invalid or expired token"},
    "user_disabled": {"ar": "تم تعطيل هذا الحساب", "en": "User account disabled"},
    "invalid_login": {
        "ar": "البريد الإلكتروني أو كلمة المرور غير صحيحة",
        "en": "Invalid email or password",
    },
    "invalid_email": {"ar": "البريد الإلكتروني غير صالح", "en": "Invalid email address"},
    "email_registered": {"ar": "هذا البريد الإلكتروني مسجل مسبقاً", "en": "This email is already registered"},
    "password_too_short": {
        "ar": "كلمة المرور يجب أن تكون 6 أحرف على الأقل",
        "en": "Password must be at least 6 characters",
    },
    "passwords_mismatch": {"ar": "كلمتا المرور غير متطابقتين", "en": "Passwords do not match"},
    "provider_only": {"ar": "هذه العملية متاحة لمقدمي الخدمات فقط", "en": "Only providers can do this"},
    "customer_only": {"ar": "هذه العملية متاحة للعملاء فقط", "en": "Only customers can do this"},
    # Profiles
    "profile_not_found": {"ar": "لم يتم العثور على الملف الشخصي", "en": "Profile not found"},
    "invalid_image": {"ar": "يرجى اختيار صورة صالحة", "en": "Please choose a valid image"},
    "avatar_too_large": {
        "ar": "حجم الصورة يجب ألا يتجاوز 2 ميجابايت",
        "en": "Image must not exceed 2 MB",
    },
    "image_too_large": {
        "ar": "حجم الصورة يجب أن يكون أقل من 5 ميجابايت",
        "en": "Image must be smaller than 5 MB",
    },
    # Services
    "required_fields": {"ar": "يرجى ملء الحقول المطلوبة", "en": "Please fill in the required fields"},
    "unknown_category": {"ar": "فئة الخدمة غير معروفة", "en": "Unknown service category"},
    "title_length": {
        "ar": "عنوان الخدمة يجب أن يكون بين 3 و 100 حرف",
        "en": "Service title must be between 3 and 100 characters",
    },
    "description_too_long": {
        "ar": "الوصف يجب ألا يتجاوز 1000 حرف",
        "en": "Description must be 1000 characters or fewer",
    },
    "service_not_found": {"ar": "الخدمة غير موجودة", "en": "Service {service_id} not found"},
    "service_inactive": {"ar": "هذه الخدمة غير متاحة حالياً", "en": "This service is not currently available"},
    "not_service_owner": {"ar": "لا يمكنك تعديل خدمة لا تملكها", "en": "You do not own this service"},
    # Availability
    "invalid_time": {"ar": "صيغة الوقت غير صحيحة", "en": "Time must use the HH:MM format"},
    "invalid_slot": {
        "ar": "وقت البداية يجب أن يسبق وقت النهاية",
        "en": "Slot start time must be before its end time",
    },
    "overlapping_slots": {"ar": "الفترات الزمنية متداخلة", "en": "Time slots overlap on day {day}"},
    "duplicate_day": {"ar": "تم تكرار اليوم نفسه", "en": "Day {day} appears more than once"},
    # Bookings
    "invalid_phone": {
        "ar": "رقم الهاتف يجب أن يبدأ بـ 05 أو 06 أو 07 ويتكون من 10 أرقام",
        "en": "Phone number must start with 05, 06 or 07 and have 10 digits",
    },
    "date_out_of_window": {
        "ar": "يرجى اختيار تاريخ خلال الأيام القادمة",
        "en": "Booking date must be within the next {days} days",
    },
    "slot_unavailable": {"ar": "هذا الموعد غير متاح", "en": "This time slot is not available"},
    "slot_taken": {"ar": "هذا الموعد محجوز مسبقاً", "en": "This time slot is already booked"},
    "own_service": {"ar": "لا يمكنك حجز خدمتك الخاصة", "en": "You cannot book your own service"},
    "booking_not_found": {"ar": "الحجز غير موجود", "en": "Booking {booking_id} not found"},
    "not_booking_participant": {"ar": "لا يمكنك الوصول إلى هذا الحجز", "en": "You are not part of this booking"},
    "invalid_transition": {
        "ar": "لا يمكن تغيير حالة الحجز من {current} إلى {target}",
        "en": "Cannot move booking from {current} to {target}",
    },
    "no_phone": {"ar": "لا يوجد رقم هاتف للتواصل", "en": "No phone number available"},
    "notes_too_long": {
        "ar": "الملاحظات يجب ألا تتجاوز 500 حرف",
        "en": "Notes must be 500 characters or fewer",
    },
    # Reviews
    "rating_required": {"ar": "يرجى اختيار تقييم", "en": "Please choose a rating from 1 to 5"},
    "comment_too_long": {
        "ar": "التعليق يجب ألا يتجاوز 500 حرف",
        "en": "Comment must be 500 characters or fewer",
    },
    "review_not_allowed": {
        "ar": "يمكن تقييم الخدمة بعد اكتمال الحجز فقط",
        "en": "Only completed bookings can be reviewed",
    },
    "review_exists": {"ar": "لقد قمت بتقييم هذا الحجز مسبقاً", "en": "This booking has already been reviewed"},
    "unknown_wilaya": {"ar": "الولاية غير معروفة", "en": "Unknown wilaya"},
    # Notifications
    "notification_not_found": {"ar": "الإشعار غير موجود", "en": "Notification {notification_id} not found"},
    # Generic
    "invalid_input": {"ar": "البيانات المدخلة غير صحيحة", "en": "Invalid request data"},
    "unexpected_error": {"ar": "حدث خطأ غير متوقع", "en": "An unexpected error occurred"},
}

BOOKING_STATUS_LABELS: dict[str, dict[str, str]] = {
    "pending": {"ar": "معلق", "en": "Pending"},
    "confirmed": {"ar": "مؤكد", "en": "Confirmed"},
    "cancelled": {"ar": "ملغي", "en": "Cancelled"},
    "completed": {"ar": "مكتمل", "en": "Completed"},
}

DAY_LABELS: dict[int, dict[str, str]] = {
    0: {"ar": "الأحد", "en": "Sunday"},
    1: {"ar": "الاثنين", "en": "Monday"},
    2: {"ar": "الثلاثاء", "en": "Tuesday"},
    3: {"ar": "الأربعاء", "en": "Wednesday"},
    4: {"ar": "الخميس", "en": "Thursday"},
    5: {"ar": "الجمعة", "en": "Friday"},
    6: {"ar": "السبت", "en": "Saturday"},
}


def negotiate_language(header: Optional[str]) -> str:
    """Pick the response language from an ``Accept-Language`` header.

    The first supported language in the header wins; quality values
    are not weighed.  Falls back to ``settings.default_language``.
    """
    if header:
        for part in header.split(","):
            tag = part.split(";")[0].strip().lower()
            primary = tag.split("-")[0]
            if primary in SUPPORTED_LANGUAGES:
                return primary
    return settings.default_language


def translate(key: str, lang: str = "ar", **params) -> str:
    """Return the message for ``key`` in ``lang``, formatted with ``params``."""
    entry = MESSAGES.get(key)
    if entry is None:
        return key
    text = entry.get(lang) or entry["ar"]
    try:
        return text.format(**params)
    except (KeyError, IndexError):
        return text


def status_label(status: str, lang: str = "ar") -> str:
    return BOOKING_STATUS_LABELS.get(status, {}).get(lang, status)


def day_label(day_of_week: int, lang: str = "ar") -> str:
    return DAY_LABELS[day_of_week][lang]


def get_language(accept_language: Optional[str] = Header(None)) -> str:
    """Dependency returning the negotiated response language."""
    return negotiate_language(accept_language)
