"""
Application package initializer.

Each area of the marketplace (accounts, services, availability,
bookings, reviews, notifications) has its own service module and a
router in ``api/v1/endpoints``.  Routers are grouped per API version
under ``api/<version>/``.
"""

from .main import app  # noqa: F401
