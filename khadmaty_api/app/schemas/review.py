"""
Pydantic schemas for reviews.

Customers review a booking once it is completed.  Service review pages
show the overall rating, per-wilaya statistics and the review list.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class ReviewCreate(BaseModel):
    """Schema for creating a new review."""

    rating: int = Field(0, description="Rating from 1 to 5")
    comment: Optional[str] = Field(None, description="Optional textual comment")


class Reviewer(BaseModel):
    full_name: str
    avatar_url: Optional[str] = None
    wilaya: Optional[str] = None
    wilaya_name: Optional[str] = None


class ReviewRead(BaseModel):
    """Schema for reading a review from the API."""

    id: int
    booking_id: int
    service_id: int
    provider_id: int
    customer_id: int
    rating: int
    comment: Optional[str] = None
    created_at: str
    customer: Optional[Reviewer] = None


class WilayaStat(BaseModel):
    wilaya: str
    name: str
    count: int
    avg_rating: float


class ServiceReviews(BaseModel):
    service_id: int
    average_rating: float
    total_reviews: int
    wilayas: List[WilayaStat]
    reviews: List[ReviewRead]
