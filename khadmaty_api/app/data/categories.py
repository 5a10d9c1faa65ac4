"""Service categories offered on the marketplace."""

from typing import NamedTuple, Optional


class Category(NamedTuple):
    id: str
    name: str
    description: str


SERVICE_CATEGORIES: list[Category] = [
    Category("electrician", "كهربائي", "تمديدات كهربائية وصيانة"),
    Category("plumber", "سباك", "أعمال السباكة والصيانة"),
    Category("barber", "حلاق", "قص شعر وحلاقة"),
    Category("tutor", "دروس خصوصية", "تعليم ودروس خاصة"),
    Category("painter", "دهان", "أعمال الدهان والطلاء"),
    Category("mechanic", "ميكانيكي", "صيانة السيارات"),
    Category("cleaning", "تنظيف", "خدمات التنظيف المنزلي"),
    Category("maintenance", "صيانة منزلية", "صيانة عامة للمنزل"),
]

_BY_ID = {category.id: category for category in SERVICE_CATEGORIES}


def get_category(category_id: Optional[str]) -> Optional[Category]:
    if category_id is None:
        return None
    return _BY_ID.get(category_id)


def is_known_category(category_id: str) -> bool:
    return category_id in _BY_ID
