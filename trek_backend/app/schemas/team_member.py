"""
Team member ("Week Heroes") schemas.
"""

from pydantic import BaseModel, Field, field_validator
from trek_backend.app.core.sanitize import sanitize_html, is_http_url


class TeamMemberUpdate(BaseModel):
    """Full replacement of one member card; every field is required."""
    name: str = Field(..., min_length=1, max_length=100)
    role: str = Field(..., min_length=1, max_length=100)
    image_url: str = Field(..., min_length=1)
    instagram_url: str = Field(..., min_length=1)

    @field_validator("name", "role")
    @classmethod
    def _escape(cls, v: str) -> str:
        return sanitize_html(v)

    @field_validator("image_url", "instagram_url")
    @classmethod
    def _check_url(cls, v: str) -> str:
        if not is_http_url(v):
            raise ValueError("Invalid URL format")
        return v

    class Config:
        extra = "forbid"
        str_strip_whitespace = True


class TeamMemberResponse(BaseModel):
    id: int
    name: str
    role: str
    image_url: str
    instagram_url: str
    display_order: int

    class Config:
        from_attributes = True
