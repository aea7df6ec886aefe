"""
Trek Pydantic schemas.

Defines request and response models for the trek catalogue. Free text is
trimmed before the length checks and HTML-escaped after them.
"""

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional
from trek_backend.app.core.sanitize import sanitize_html, is_http_url
from trek_backend.app.models.trek import DEFAULT_TREK_PRICE
from trek_backend.app.models.trek_enums import TrekDifficulty


def _image_url(value: str) -> str:
    if not is_http_url(value):
        raise ValueError("Image URL must be a valid HTTP or HTTPS URL")
    return value


class TrekCreate(BaseModel):
    """Schema for creating a new trek (admin)."""
    name: str = Field(..., min_length=3, max_length=100, description="Trek name")
    description: str = Field(..., min_length=10, max_length=2000)
    duration: str = Field(..., min_length=1, max_length=50, description="e.g. '2 Days'")
    trek_length: float = Field(..., gt=0, le=1000, description="Length in km")
    difficulty: TrekDifficulty
    max_altitude: float = Field(..., gt=0, le=30000, description="Altitude in ft")
    base_village: str = Field(..., min_length=2, max_length=100)
    transport: str = Field(..., min_length=2, max_length=200)
    meals: str = Field(..., min_length=2, max_length=200)
    sightseeing: str = Field(..., min_length=2, max_length=200)
    image: str = Field(..., min_length=1, description="HTTP(S) image URL")
    price: Optional[float] = Field(None, ge=0, le=100000)

    @field_validator(
        "name", "description", "duration", "base_village",
        "transport", "meals", "sightseeing",
    )
    @classmethod
    def _escape(cls, v: str) -> str:
        return sanitize_html(v)

    @field_validator("image")
    @classmethod
    def _check_image(cls, v: str) -> str:
        return _image_url(v)

    @field_validator("price")
    @classmethod
    def _default_price(cls, v):
        return DEFAULT_TREK_PRICE if v is None else v

    class Config:
        extra = "forbid"
        str_strip_whitespace = True
        validate_default = True


class TrekPriceUpdate(BaseModel):
    price: float = Field(..., ge=0, le=100000)

    class Config:
        extra = "forbid"


class TrekImageUpdate(BaseModel):
    image: str = Field(..., min_length=1)

    @field_validator("image")
    @classmethod
    def _check_image(cls, v: str) -> str:
        return _image_url(v)

    class Config:
        extra = "forbid"
        str_strip_whitespace = True


class TrekResponse(BaseModel):
    """Schema for trek response."""
    id: int
    name: str
    description: str
    duration: str
    trek_length: float
    difficulty: TrekDifficulty
    max_altitude: float
    base_village: str
    transport: str
    meals: str
    sightseeing: str
    image: str
    price: float
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TrekCreatedResponse(BaseModel):
    message: str
    id: int
    trek: TrekResponse


class MessageResponse(BaseModel):
    message: str
