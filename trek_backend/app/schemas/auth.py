"""
Admin authentication schemas.
"""

from pydantic import BaseModel, Field


class AdminLogin(BaseModel):
    password: str = Field(..., min_length=1)

    class Config:
        extra = "forbid"


class AdminTokenResponse(BaseModel):
    token: str


class TokenVerifyResponse(BaseModel):
    valid: bool
