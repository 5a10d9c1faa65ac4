"""
Service layer.

Each service encapsulates the business logic of one area (accounts,
listings, availability, bookings, reviews, notifications, storage) and
talks to SQLite through ``core.db``.  API handlers stay thin: they
parse the request, call a service and return its result.
"""
