"""
Business logic for accounts and profiles.

``UserService`` handles sign-up, sign-in and sign-out, the settings
page (profile fields, avatar, password, account deletion) and the
provider dashboard figures.  All operations work directly against the
SQLite database defined in ``core.db``.
"""

import logging
import sqlite3
from typing import Dict, Optional

from khadmaty_api.app.core.db import get_connection
from khadmaty_api.app.core.errors import AuthenticationError, ConflictError, InvalidInputError, NotFoundError
from khadmaty_api.app.core.security import create_access_token, hash_password, verify_password
from khadmaty_api.app.core.validators import clean_text, validate_email, validate_phone
from khadmaty_api.app.data.wilayas import WILAYAS, get_wilaya_name
from khadmaty_api.app.schemas.user import PasswordChange, ProfileRead, ProfileUpdate, ProviderStats, SignUp, TokenResponse


MIN_PASSWORD_LENGTH = 6

PROFILE_COLUMNS = "id, email, full_name, phone, avatar_url, wilaya, role, created_at"


def _row_to_profile(row: sqlite3.Row) -> ProfileRead:
    return ProfileRead(
        id=row["id"],
        email=row["email"],
        full_name=row["full_name"],
        phone=row["phone"],
        avatar_url=row["avatar_url"],
        wilaya=row["wilaya"],
        wilaya_name=get_wilaya_name(row["wilaya"]),
        role=row["role"],
        created_at=str(row["created_at"]),
    )


def _validate_wilaya(code: Optional[str]) -> Optional[str]:
    code = clean_text(code)
    if code is None:
        return None
    if code not in WILAYAS:
        raise InvalidInputError("unknown_wilaya")
    return code


class UserService:
    """Service for accounts, profiles and sessions."""

    @classmethod
    async def create_user(cls, data: SignUp) -> TokenResponse:
        """Register a customer or provider and return a session token.

        The password must have at least six characters and the email
        must not be registered yet.  Phone and wilaya are optional but
        validated when given.
        """
        logger = logging.getLogger(__name__)
        email = validate_email(data.email)
        if len(data.password) < MIN_PASSWORD_LENGTH:
            raise InvalidInputError("password_too_short")
        full_name = clean_text(data.full_name)
        if full_name is None:
            raise InvalidInputError("required_fields")
        phone = validate_phone(data.phone)
        wilaya = _validate_wilaya(data.wilaya)

        conn = get_connection()
        try:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    "INSERT INTO users (email, password, full_name, phone, role, wilaya) "
                    "VALUES (?, ?, ?, ?, ?, ?)",
                    (email, hash_password(data.password), full_name, phone, data.role, wilaya),
                )
            except sqlite3.IntegrityError:
                raise ConflictError("email_registered")
            user_id = cursor.lastrowid
            conn.commit()
            row = cursor.execute(
                f"SELECT {PROFILE_COLUMNS} FROM users WHERE id = ?", (user_id,)
            ).fetchone()
        finally:
            conn.close()
        logger.info("Registered %s %s (id=%s)", data.role, email, user_id)
        profile = _row_to_profile(row)
        return TokenResponse(access_token=create_access_token({"sub": str(user_id)}), user=profile)

    @classmethod
    async def authenticate(cls, email: str, password: str) -> TokenResponse:
        """Check credentials and issue a new token.

        Unknown emails, wrong passwords and disabled accounts all raise
        the same ``invalid_login`` error so the response does not reveal
        which emails are registered.
        """
        conn = get_connection()
        try:
            row = conn.execute(
                f"SELECT {PROFILE_COLUMNS}, password, disabled FROM users WHERE email = ?",
                (email.strip().lower(),),
            ).fetchone()
        finally:
            conn.close()
        if not row or row["disabled"] or not verify_password(password, row["password"]):
            logging.getLogger(__name__).info("Failed sign-in for %s", email)
            raise AuthenticationError("invalid_login")
        return TokenResponse(
            access_token=create_access_token({"sub": str(row["id"])}),
            user=_row_to_profile(row),
        )

    @classmethod
    async def sign_out(cls, current_user: Dict[str, object]) -> None:
        """Revoke the token that authenticated ``current_user``."""
        conn = get_connection()
        try:
            conn.execute(
                "INSERT OR IGNORE INTO revoked_tokens (jti, user_id) VALUES (?, ?)",
                (current_user.get("jti"), current_user.get("user_id")),
            )
            conn.commit()
        finally:
            conn.close()
        logging.getLogger(__name__).info("User %s signed out", current_user.get("user_id"))

    @classmethod
    async def get_profile(cls, user_id: int) -> ProfileRead:
        conn = get_connection()
        try:
            row = conn.execute(
                f"SELECT {PROFILE_COLUMNS} FROM users WHERE id = ?", (user_id,)
            ).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError("profile_not_found")
        return _row_to_profile(row)

    @classmethod
    async def update_profile(cls, user_id: int, update: ProfileUpdate) -> ProfileRead:
        """Apply the fields present in ``update`` to the user's profile."""
        fields = update.model_fields_set
        updates: dict = {}
        if "full_name" in fields:
            full_name = clean_text(update.full_name)
            if full_name is None:
                raise InvalidInputError("required_fields")
            updates["full_name"] = full_name
        if "phone" in fields:
            updates["phone"] = validate_phone(update.phone)
        if "avatar_url" in fields:
            updates["avatar_url"] = clean_text(update.avatar_url)
        if "wilaya" in fields:
            updates["wilaya"] = _validate_wilaya(update.wilaya)
        if updates:
            await cls._update_columns(user_id, updates)
        return await cls.get_profile(user_id)

    @classmethod
    async def set_avatar(cls, user_id: int, avatar_url: str) -> None:
        await cls._update_columns(user_id, {"avatar_url": avatar_url})

    @classmethod
    async def change_password(cls, user_id: int, data: PasswordChange) -> None:
        if data.new_password != data.confirm_password:
            raise InvalidInputError("passwords_mismatch")
        if len(data.new_password) < MIN_PASSWORD_LENGTH:
            raise InvalidInputError("password_too_short")
        await cls._update_columns(user_id, {"password": hash_password(data.new_password)})
        logging.getLogger(__name__).info("Password changed for user %s", user_id)

    @classmethod
    async def delete_user(cls, user_id: int) -> None:
        """Delete the account; services, bookings, reviews and notifications cascade."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM users WHERE id = ?", (user_id,))
            if cursor.rowcount == 0:
                raise NotFoundError("profile_not_found")
            conn.commit()
        finally:
            conn.close()
        logging.getLogger(__name__).info("Deleted user %s", user_id)

    @classmethod
    async def provider_stats(cls, user_id: int) -> ProviderStats:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            services = cursor.execute(
                "SELECT COUNT(*) AS total, COALESCE(SUM(is_active), 0) AS active "
                "FROM services WHERE provider_id = ?",
                (user_id,),
            ).fetchone()
            status_rows = cursor.execute(
                "SELECT status, COUNT(*) AS total FROM bookings WHERE provider_id = ? GROUP BY status",
                (user_id,),
            ).fetchall()
            rating = cursor.execute(
                "SELECT COALESCE(AVG(rating), 0) AS avg_rating, COUNT(*) AS total "
                "FROM reviews WHERE provider_id = ?",
                (user_id,),
            ).fetchone()
        finally:
            conn.close()
        by_status = {status: 0 for status in ("pending", "confirmed", "cancelled", "completed")}
        for row in status_rows:
            by_status[row["status"]] = row["total"]
        return ProviderStats(
            services_count=services["total"],
            active_services_count=services["active"],
            bookings_by_status=by_status,
            average_rating=round(rating["avg_rating"], 2),
            reviews_count=rating["total"],
        )

    @classmethod
    async def _update_columns(cls, user_id: int, updates: dict) -> None:
        assignments = ", ".join(f"{column} = ?" for column in updates)
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                f"UPDATE users SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (*updates.values(), user_id),
            )
            if cursor.rowcount == 0:
                raise NotFoundError("profile_not_found")
            conn.commit()
        finally:
            conn.close()
