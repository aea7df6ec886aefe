"""
Schemas for feedback and business-query submissions.
"""

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional
from trek_backend.app.core.sanitize import (
    sanitize_html, is_valid_email, is_valid_phone, count_words
)

MAX_FEEDBACK_WORDS = 100


class FeedbackCreate(BaseModel):
    feedback: str = Field(..., min_length=1, description="Feedback text, at most 100 words")

    @field_validator("feedback")
    @classmethod
    def _check_feedback(cls, v: str) -> str:
        sanitized = sanitize_html(v)
        if count_words(sanitized) > MAX_FEEDBACK_WORDS:
            raise ValueError(f"Feedback must be {MAX_FEEDBACK_WORDS} words or less")
        return sanitized

    class Config:
        extra = "forbid"
        str_strip_whitespace = True


class FeedbackResponse(BaseModel):
    id: int
    feedback: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BusinessQueryCreate(BaseModel):
    """Schema for business-query and contact-form submissions."""
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=255)
    phone: str
    message: str = Field(..., min_length=1, max_length=5000)

    @field_validator("email")
    @classmethod
    def _check_email(cls, v: str) -> str:
        if not is_valid_email(v):
            raise ValueError("Invalid email format")
        return v

    @field_validator("phone")
    @classmethod
    def _check_phone(cls, v: str) -> str:
        if not is_valid_phone(v):
            raise ValueError("Invalid phone number format")
        return v

    @field_validator("name", "message")
    @classmethod
    def _escape(cls, v: str) -> str:
        return sanitize_html(v)

    class Config:
        extra = "forbid"
        str_strip_whitespace = True


class BusinessQueryResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: str
    message: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SubmissionCreatedResponse(BaseModel):
    message: str
    id: Optional[int] = None
