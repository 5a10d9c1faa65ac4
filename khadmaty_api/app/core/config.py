"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from environment
variables.  Defaults are provided for all fields so the API can start
without any configuration; in a production deployment you should at
least override ``SECRET_KEY``, ``DATABASE_URL`` and ``MEDIA_ROOT``.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Khadmaty API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))

    # Path to the SQLite database.  Relative paths are resolved against
    # the package root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "khadmaty.db")

    # Object storage for service images and avatars.  Files are written
    # below ``media_root`` and served back under ``media_url``.
    media_root: str = os.getenv("MEDIA_ROOT", "media")
    media_url: str = os.getenv("MEDIA_URL", "/media")
    max_service_image_bytes: int = int(os.getenv("MAX_SERVICE_IMAGE_BYTES", str(5 * 1024 * 1024)))
    max_avatar_bytes: int = int(os.getenv("MAX_AVATAR_BYTES", str(2 * 1024 * 1024)))

    # Number of days (starting today) a customer may book ahead.
    booking_window_days: int = int(os.getenv("BOOKING_WINDOW_DAYS", "7"))

    # International dialling prefix used when turning local phone numbers
    # (``05xxxxxxxx``) into WhatsApp deep links.
    whatsapp_country_code: str = os.getenv("WHATSAPP_COUNTRY_CODE", "213")

    # Language used for error messages when the client does not ask for one.
    default_language: str = os.getenv("DEFAULT_LANGUAGE", "ar")


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must
# be set before importing this module.
settings = Settings()
