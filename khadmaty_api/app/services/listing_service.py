"""
Business logic for service listings.

``ListingService`` implements the provider's service dialogs (create,
edit, delete, image) and the public catalog: category counts, search
with filters and sorting, and the service detail view.  Every read
joins the provider's contact details and the review summary so the
client can render a card from one record.
"""

import logging
import sqlite3
from typing import List, Optional

from khadmaty_api.app.core.db import get_connection
from khadmaty_api.app.core.errors import InvalidInputError, NotFoundError, PermissionDeniedError
from khadmaty_api.app.core.validators import check_length, clean_text, price_label
from khadmaty_api.app.data.categories import SERVICE_CATEGORIES, get_category, is_known_category
from khadmaty_api.app.schemas.listing import CategoryRead, ServiceCreate, ServiceFilters, ServiceRead, ServiceUpdate


ONLINE_LOCATIONS = ("أونلاين", "online")

SERVICE_SELECT = """
    SELECT s.id, s.provider_id, s.title, s.category, s.description, s.price_fixed,
           s.price_per_hour, s.location, s.image_url, s.is_active, s.created_at, s.updated_at,
           u.full_name AS provider_name, u.phone AS provider_phone,
           u.avatar_url AS provider_avatar_url,
           COALESCE(r.avg_rating, 0) AS average_rating,
           COALESCE(r.reviews_count, 0) AS reviews_count
    FROM services s
    JOIN users u ON u.id = s.provider_id
    LEFT JOIN (
        SELECT service_id, AVG(rating) AS avg_rating, COUNT(*) AS reviews_count
        FROM reviews GROUP BY service_id
    ) r ON r.service_id = s.id
"""

EFFECTIVE_PRICE = "COALESCE(s.price_fixed, s.price_per_hour)"

SORT_CLAUSES = {
    "newest": "s.created_at DESC, s.id DESC",
    "price_asc": f"{EFFECTIVE_PRICE} IS NULL, {EFFECTIVE_PRICE} ASC, s.id DESC",
    "price_desc": f"{EFFECTIVE_PRICE} IS NULL, {EFFECTIVE_PRICE} DESC, s.id DESC",
    "rating": "average_rating DESC, reviews_count DESC, s.id DESC",
}


def row_to_service(row: sqlite3.Row) -> ServiceRead:
    category = get_category(row["category"])
    return ServiceRead(
        id=row["id"],
        provider_id=row["provider_id"],
        title=row["title"],
        category=row["category"],
        category_name=category.name if category else None,
        description=row["description"],
        price_fixed=row["price_fixed"],
        price_per_hour=row["price_per_hour"],
        price_label=price_label(row["price_fixed"], row["price_per_hour"]),
        location=row["location"],
        image_url=row["image_url"],
        is_active=bool(row["is_active"]),
        created_at=str(row["created_at"]),
        updated_at=str(row["updated_at"]) if row["updated_at"] else None,
        provider_name=row["provider_name"],
        provider_phone=row["provider_phone"],
        provider_avatar_url=row["provider_avatar_url"],
        average_rating=round(row["average_rating"], 2),
        reviews_count=row["reviews_count"],
    )


def _clean_title(title: Optional[str]) -> str:
    title = clean_text(title)
    if title is None:
        raise InvalidInputError("required_fields")
    if not 3 <= len(title) <= 100:
        raise InvalidInputError("title_length")
    return title


def _clean_category(category: Optional[str]) -> str:
    if not category:
        raise InvalidInputError("required_fields")
    if not is_known_category(category):
        raise InvalidInputError("unknown_category")
    return category


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def fetch_owned_service(cursor: sqlite3.Cursor, service_id: int, provider_id: int) -> sqlite3.Row:
    """Return the raw service row, checking that ``provider_id`` owns it."""
    row = cursor.execute(
        "SELECT id, provider_id FROM services WHERE id = ?", (service_id,)
    ).fetchone()
    if not row:
        raise NotFoundError("service_not_found", service_id=service_id)
    if row["provider_id"] != provider_id:
        raise PermissionDeniedError("not_service_owner")
    return row


class ListingService:
    """Service for managing and searching listings."""

    @classmethod
    async def create_service(cls, provider_id: int, data: ServiceCreate) -> ServiceRead:
        """Create an active listing owned by ``provider_id``."""
        logger = logging.getLogger(__name__)
        title = _clean_title(data.title)
        category = _clean_category(data.category)
        description = check_length(clean_text(data.description), 1000, "description_too_long")
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO services
                    (provider_id, title, category, description, price_fixed, price_per_hour, location, is_active)
                VALUES (?, ?, ?, ?, ?, ?, ?, 1)
                """,
                (
                    provider_id,
                    title,
                    category,
                    description,
                    data.price_fixed,
                    data.price_per_hour,
                    clean_text(data.location),
                ),
            )
            service_id = cursor.lastrowid
            conn.commit()
        finally:
            conn.close()
        logger.info("Provider %s created service %s", provider_id, service_id)
        return await cls.get_service(service_id)

    @classmethod
    async def update_service(cls, service_id: int, provider_id: int, update: ServiceUpdate) -> ServiceRead:
        """Update the fields present in ``update``; only the owner may do so."""
        fields = update.model_fields_set
        updates: dict = {}
        if "title" in fields:
            updates["title"] = _clean_title(update.title)
        if "category" in fields:
            updates["category"] = _clean_category(update.category)
        if "description" in fields:
            updates["description"] = check_length(
                clean_text(update.description), 1000, "description_too_long"
            )
        if "price_fixed" in fields:
            updates["price_fixed"] = update.price_fixed
        if "price_per_hour" in fields:
            updates["price_per_hour"] = update.price_per_hour
        if "location" in fields:
            updates["location"] = clean_text(update.location)
        if "is_active" in fields and update.is_active is not None:
            updates["is_active"] = 1 if update.is_active else 0
        if "image_url" in fields:
            updates["image_url"] = clean_text(update.image_url)

        conn = get_connection()
        try:
            cursor = conn.cursor()
            fetch_owned_service(cursor, service_id, provider_id)
            if updates:
                assignments = ", ".join(f"{column} = ?" for column in updates)
                cursor.execute(
                    f"UPDATE services SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                    (*updates.values(), service_id),
                )
                conn.commit()
        finally:
            conn.close()
        if updates:
            logging.getLogger(__name__).info(
                "Service %s updated fields %s", service_id, sorted(updates)
            )
        return await cls.get_service(service_id)

    @classmethod
    async def set_image(cls, service_id: int, provider_id: int, image_url: Optional[str]) -> ServiceRead:
        return await cls.update_service(service_id, provider_id, ServiceUpdate(image_url=image_url))

    @classmethod
    async def check_owner(cls, service_id: int, provider_id: int) -> None:
        conn = get_connection()
        try:
            fetch_owned_service(conn.cursor(), service_id, provider_id)
        finally:
            conn.close()

    @classmethod
    async def delete_service(cls, service_id: int, provider_id: int) -> None:
        """Delete a listing; availability, bookings and reviews cascade."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            fetch_owned_service(cursor, service_id, provider_id)
            cursor.execute("DELETE FROM services WHERE id = ?", (service_id,))
            conn.commit()
        finally:
            conn.close()
        logging.getLogger(__name__).info("Provider %s deleted service %s", provider_id, service_id)

    @classmethod
    async def get_service(cls, service_id: int) -> ServiceRead:
        conn = get_connection()
        try:
            row = conn.execute(SERVICE_SELECT + " WHERE s.id = ?", (service_id,)).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError("service_not_found", service_id=service_id)
        return row_to_service(row)

    @classmethod
    async def list_provider_services(cls, provider_id: int) -> List[ServiceRead]:
        """Return all of a provider's services, newest first, inactive included."""
        conn = get_connection()
        try:
            rows = conn.execute(
                SERVICE_SELECT + " WHERE s.provider_id = ? ORDER BY s.created_at DESC, s.id DESC",
                (provider_id,),
            ).fetchall()
        finally:
            conn.close()
        return [row_to_service(row) for row in rows]

    @classmethod
    async def search_services(cls, filters: ServiceFilters) -> List[ServiceRead]:
        """Search active services.

        Price bounds apply to the effective price (fixed, otherwise
        hourly).  Services without any price are kept only while
        ``price_min`` is zero.  ``q`` matches title, description,
        provider name or the Arabic category name.
        """
        where = ["s.is_active = 1"]
        params: list = []
        if filters.category:
            where.append("s.category = ?")
            params.append(filters.category)
        query = clean_text(filters.q)
        if query:
            pattern = f"%{_escape_like(query)}%"
            clauses = [
                "s.title LIKE ? ESCAPE '\\'",
                "s.description LIKE ? ESCAPE '\\'",
                "u.full_name LIKE ? ESCAPE '\\'",
            ]
            params.extend([pattern, pattern, pattern])
            lowered = query.lower()
            matching = [c.id for c in SERVICE_CATEGORIES if query in c.name or lowered in c.id]
            if matching:
                clauses.append(f"s.category IN ({', '.join('?' for _ in matching)})")
                params.extend(matching)
            where.append("(" + " OR ".join(clauses) + ")")
        if filters.price_min > 0:
            where.append(f"{EFFECTIVE_PRICE} IS NOT NULL AND {EFFECTIVE_PRICE} >= ?")
            params.append(filters.price_min)
        if filters.price_max is not None:
            where.append(f"({EFFECTIVE_PRICE} IS NULL OR {EFFECTIVE_PRICE} <= ?)")
            params.append(filters.price_max)
        if filters.min_rating > 0:
            where.append("COALESCE(r.avg_rating, 0) >= ?")
            params.append(filters.min_rating)
        if filters.online_only:
            where.append("LOWER(TRIM(COALESCE(s.location, ''))) IN (?, ?)")
            params.extend(ONLINE_LOCATIONS)

        sql = (
            SERVICE_SELECT
            + " WHERE "
            + " AND ".join(where)
            + f" ORDER BY {SORT_CLAUSES[filters.sort_by]} LIMIT ? OFFSET ?"
        )
        params.extend([filters.limit, filters.offset])
        conn = get_connection()
        try:
            rows = conn.execute(sql, tuple(params)).fetchall()
        finally:
            conn.close()
        return [row_to_service(row) for row in rows]

    @classmethod
    async def list_categories(cls) -> List[CategoryRead]:
        """Return the static category catalog with active service counts."""
        conn = get_connection()
        try:
            rows = conn.execute(
                "SELECT category, COUNT(*) AS total FROM services WHERE is_active = 1 GROUP BY category"
            ).fetchall()
        finally:
            conn.close()
        counts = {row["category"]: row["total"] for row in rows}
        return [
            CategoryRead(
                id=category.id,
                name=category.name,
                description=category.description,
                services_count=counts.get(category.id, 0),
            )
            for category in SERVICE_CATEGORIES
        ]
