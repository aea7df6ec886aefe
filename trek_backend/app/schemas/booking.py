"""
Booking Pydantic schemas.

JSON bodies use the camelCase names of the public booking form
(``trekName``, ``fullName``, ``groupSize``).
"""

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional
from trek_backend.app.core.sanitize import sanitize_html, is_valid_email, is_valid_phone


class BookingCreate(BaseModel):
    """Schema for the public booking form."""
    trek_id: int = Field(..., gt=0)
    trek_name: str = Field(..., alias="trekName", min_length=1, max_length=100)
    full_name: str = Field(..., alias="fullName", min_length=2, max_length=100)
    contact: str = Field(..., description="Phone number")
    email: str = Field(..., max_length=255)
    group_size: int = Field(1, alias="groupSize", ge=1, le=100)
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator("email")
    @classmethod
    def _check_email(cls, v: str) -> str:
        if not is_valid_email(v):
            raise ValueError("Invalid email format")
        return v

    @field_validator("contact")
    @classmethod
    def _check_phone(cls, v: str) -> str:
        if not is_valid_phone(v):
            raise ValueError("Invalid phone number format")
        return v

    @field_validator("trek_name", "full_name")
    @classmethod
    def _escape(cls, v: str) -> str:
        return sanitize_html(v)

    @field_validator("notes")
    @classmethod
    def _escape_notes(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        return sanitize_html(v)

    class Config:
        extra = "forbid"
        populate_by_name = True
        str_strip_whitespace = True


class BookingResponse(BaseModel):
    """Schema for booking response (admin list)."""
    id: int
    trek_id: int
    trek_name: str = Field(..., alias="trekName")
    full_name: str = Field(..., alias="fullName")
    contact: str
    email: str
    group_size: int = Field(..., alias="groupSize")
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        populate_by_name = True


class BookingCreatedResponse(BaseModel):
    message: str
    booking_id: int = Field(..., alias="bookingId")

    class Config:
        populate_by_name = True
