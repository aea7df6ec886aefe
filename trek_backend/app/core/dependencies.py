"""
Authentication dependencies for FastAPI.

This module provides the dependency protecting admin-only routes with the
bearer token issued by ``POST /api/admin/login``.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from trek_backend.app.core.exceptions import AuthenticationError
from trek_backend.app.core.jwt import decode_access_token

# HTTP Bearer security scheme; a missing header is reported as 401 below
security = HTTPBearer(auto_error=False)


async def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """
    FastAPI dependency for admin JWT authentication.

    Only the signature and expiry are checked. Inactivity is tracked by the
    admin session client, not by the server.

    Returns:
        Decoded token payload

    Raises:
        AuthenticationError: 401 if the header is missing or the token invalid
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("No token provided")

    payload = decode_access_token(credentials.credentials)
    if payload is None or not payload.get("admin"):
        raise AuthenticationError("Invalid token")

    return payload
