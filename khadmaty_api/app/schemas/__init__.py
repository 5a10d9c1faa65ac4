"""
Pydantic schema definitions for API payloads.

Each domain (profiles, services, bookings, etc.) defines its own
Pydantic models for request and response bodies.  Schemas only check
shape and hard bounds; the rules users see as form errors (required
fields, phone format, password length) live in the service layer so
they can be reported in the client's language.
"""
