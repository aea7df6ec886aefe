"""
GPS live-tracking schemas.

Request bodies for the driver panel and viewer endpoints, and the row
shapes returned by the polling reads.
"""

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional
from trek_backend.app.core.sanitize import sanitize_html, is_http_url

DEFAULT_STOP_MESSAGE = "GPS tracking stopped"


class LocationSubmit(BaseModel):
    """GPS ping from the driver panel."""
    trek_id: int = Field(..., gt=0)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    accuracy: Optional[float] = Field(None, ge=0)
    altitude: Optional[float] = None
    speed: Optional[float] = Field(None, ge=0)
    heading: Optional[float] = Field(None, ge=0, le=360)

    class Config:
        extra = "forbid"


class LocationSubmitResponse(BaseModel):
    success: bool
    live_trek_id: int


class TrekActivate(BaseModel):
    """Driver action turning a trek live."""
    trek_id: int = Field(..., gt=0)
    google_maps_link: str = Field(..., min_length=1)
    trek_password: str = Field(..., min_length=1, max_length=255)
    driver_name: str = Field(..., min_length=1, max_length=100)

    @field_validator("google_maps_link")
    @classmethod
    def _check_link(cls, v: str) -> str:
        if not is_http_url(v):
            raise ValueError("Google Maps link must be a valid HTTP or HTTPS URL")
        return v

    @field_validator("driver_name")
    @classmethod
    def _escape(cls, v: str) -> str:
        return sanitize_html(v)

    class Config:
        extra = "forbid"
        str_strip_whitespace = True


class TrekStop(BaseModel):
    stop_message: Optional[str] = Field(None, max_length=500)

    @field_validator("stop_message")
    @classmethod
    def _escape(cls, v: Optional[str]) -> Optional[str]:
        return sanitize_html(v) if v else None

    class Config:
        extra = "forbid"
        str_strip_whitespace = True


class DriverPasswordCheck(BaseModel):
    password: str

    class Config:
        extra = "forbid"


class TrekPasswordCheck(BaseModel):
    trek_id: int = Field(..., gt=0)
    password: str

    class Config:
        extra = "forbid"


class PasswordCheckResponse(BaseModel):
    valid: bool
    error: Optional[str] = None


class GpsConfigUpdate(BaseModel):
    driver_password: Optional[str] = Field(None, min_length=1, max_length=255)

    class Config:
        extra = "forbid"


class SuccessResponse(BaseModel):
    success: bool
    message: str


class DriverTrekRow(BaseModel):
    """Row of the driver panel list: every trek, tracked or not."""
    id: int
    name: str
    is_active: bool
    last_location_time: Optional[datetime] = None
    driver_name: Optional[str] = None
    stop_message: Optional[str] = None
    live_trek_created: Optional[datetime] = None


class ActiveTrekRow(BaseModel):
    """Row of the viewer list: active treks with their latest position."""
    id: int
    name: str
    is_active: bool
    last_location_time: Optional[datetime] = None
    driver_name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    accuracy: Optional[float] = None


class TrekLocationResponse(BaseModel):
    latitude: float
    longitude: float
    accuracy: Optional[float] = None
    altitude: Optional[float] = None
    speed: Optional[float] = None
    heading: Optional[float] = None
    timestamp: datetime

    class Config:
        from_attributes = True


class TrekDetailsResponse(BaseModel):
    id: int
    name: str
    google_maps_link: Optional[str] = None
    is_active: bool
    last_location_update: Optional[datetime] = None
    driver_id: Optional[str] = None
    status_message: Optional[str] = None
