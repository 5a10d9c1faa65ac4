"""
Top-level router for version 1 of the API.

Aggregates the routers of every area under a single router that
``main`` mounts at ``/api/v1``.
"""

from fastapi import APIRouter

from .endpoints import (
    auth,
    profiles,
    categories,
    services,
    availability,
    bookings,
    reviews,
    notifications,
    info,
)

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(profiles.router, prefix="/profiles", tags=["profiles"])
router.include_router(categories.router, prefix="/categories", tags=["categories"])
router.include_router(services.router, prefix="/services", tags=["services"])
# Availability and bookings define full paths since they span several prefixes.
router.include_router(availability.router, tags=["availability"])
router.include_router(bookings.router, tags=["bookings"])
router.include_router(reviews.router, tags=["reviews"])
router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
router.include_router(info.router, prefix="/info", tags=["info"])
