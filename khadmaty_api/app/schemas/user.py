"""
Pydantic models for accounts and profiles.

A user signs up either as a ``customer`` or as a ``provider``.  Profile
fields (name, phone, avatar, wilaya) live on the same record and are
edited from the settings page.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field


Role = Literal["customer", "provider"]


class SignUp(BaseModel):
    """Payload for creating an account."""

    email: str = Field(..., max_length=254, examples=["user@example.com"])
    password: str = Field(..., max_length=128)
    full_name: str = Field(..., max_length=100, examples=["أحمد محمد"])
    phone: Optional[str] = Field(None, examples=["0551234567"])
    role: Role = "customer"
    wilaya: Optional[str] = Field(None, examples=["16"])


class SignIn(BaseModel):
    email: str
    password: str


class ProfileRead(BaseModel):
    """Schema for reading a profile from the API."""

    id: int
    email: str
    full_name: str
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    wilaya: Optional[str] = None
    wilaya_name: Optional[str] = None
    role: Role
    created_at: str

    model_config = {
        "from_attributes": True,
    }


class ProfileUpdate(BaseModel):
    """Schema for updating a profile.

    All fields are optional; only provided fields are updated.  Sending
    an empty ``phone`` or ``avatar_url`` clears the stored value.
    """

    full_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    wilaya: Optional[str] = None


class PasswordChange(BaseModel):
    new_password: str = Field(..., max_length=128)
    confirm_password: str = Field(..., max_length=128)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: ProfileRead


class AvatarUploadResponse(BaseModel):
    avatar_url: str


class ProviderStats(BaseModel):
    """Figures shown in the provider dashboard sidebar."""

    services_count: int
    active_services_count: int
    bookings_by_status: dict[str, int]
    average_rating: float
    reviews_count: int
