"""
Pydantic models for service listings.

A listing is a service offered by a provider: a title, a category from
the static catalog, optional fixed or hourly price, and an optional
image.  Read models carry the provider's contact details and rating
summary so list views need a single request.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field


SortOption = Literal["newest", "price_asc", "price_desc", "rating"]


class ServiceBase(BaseModel):
    title: str = Field(..., max_length=200, examples=["تمديدات كهربائية"])
    category: str = Field(..., examples=["electrician"])
    description: Optional[str] = None
    price_fixed: Optional[float] = Field(None, ge=0, examples=[1500])
    price_per_hour: Optional[float] = Field(None, ge=0)
    location: Optional[str] = Field(None, max_length=200, examples=["الجزائر - باب الزوار"])


class ServiceCreate(ServiceBase):
    """Schema for creating a service."""
    pass


class ServiceUpdate(BaseModel):
    """Schema for updating a service.

    All fields are optional; only provided fields are updated.
    """

    title: Optional[str] = Field(None, max_length=200)
    category: Optional[str] = None
    description: Optional[str] = None
    price_fixed: Optional[float] = Field(None, ge=0)
    price_per_hour: Optional[float] = Field(None, ge=0)
    location: Optional[str] = Field(None, max_length=200)
    is_active: Optional[bool] = None
    image_url: Optional[str] = None


class ServiceRead(ServiceBase):
    id: int
    provider_id: int
    category_name: Optional[str] = None
    price_label: str
    image_url: Optional[str] = None
    is_active: bool
    created_at: str
    updated_at: Optional[str] = None
    provider_name: Optional[str] = None
    provider_phone: Optional[str] = None
    provider_avatar_url: Optional[str] = None
    average_rating: float = 0.0
    reviews_count: int = 0

    model_config = {
        "from_attributes": True,
    }


class ServiceFilters(BaseModel):
    """Search criteria for the public catalog."""

    category: Optional[str] = None
    q: Optional[str] = None
    price_min: float = Field(0, ge=0)
    price_max: Optional[float] = Field(None, ge=0)
    min_rating: float = Field(0, ge=0, le=5)
    online_only: bool = False
    sort_by: SortOption = "newest"
    limit: int = Field(20, ge=1, le=100)
    offset: int = Field(0, ge=0)


class CategoryRead(BaseModel):
    id: str
    name: str
    description: str
    services_count: int = 0


class ImageUploadResponse(BaseModel):
    image_url: str
