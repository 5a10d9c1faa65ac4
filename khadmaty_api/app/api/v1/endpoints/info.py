"""Service information endpoint for API v1."""

from typing import Any, Dict

from fastapi import APIRouter

from khadmaty_api.app.core.config import settings
from khadmaty_api.app.core.i18n import SUPPORTED_LANGUAGES


router = APIRouter()


@router.get("/", response_model=Dict[str, Any])
async def get_info() -> Dict[str, Any]:
    """Report the API name and version; doubles as a health check."""
    return {
        "name": settings.project_name,
        "version": settings.api_version,
        "languages": list(SUPPORTED_LANGUAGES),
        "booking_window_days": settings.booking_window_days,
    }
