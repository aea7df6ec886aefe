"""
Admin authentication API endpoints.

A single shared admin password is exchanged for a signed, time-limited
bearer token. There is no server-side session store.
"""

import hmac
import logging
from fastapi import APIRouter, Depends, Request

from trek_backend.app.core.config import settings
from trek_backend.app.core.dependencies import require_admin
from trek_backend.app.core.exceptions import AuthenticationError, RateLimitExceededError
from trek_backend.app.core.jwt import create_access_token
from trek_backend.app.core.reliability import login_rate_limiter
from trek_backend.app.schemas.auth import AdminLogin, AdminTokenResponse, TokenVerifyResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin Authentication"])


@router.post("/login", response_model=AdminTokenResponse)
async def login(credentials: AdminLogin, request: Request):
    """
    Exchange the admin password for a JWT.

    Attempts are throttled per client address.
    """
    client_ip = request.client.host if request.client else "unknown"
    allowed, retry_after = login_rate_limiter.hit(client_ip)
    if not allowed:
        logger.warning("Admin login throttled", extra={"ip": client_ip})
        raise RateLimitExceededError(retry_after)

    if not hmac.compare_digest(credentials.password.encode("utf-8"), settings.admin_password.encode("utf-8")):
        logger.warning("Admin login failed", extra={"ip": client_ip})
        raise AuthenticationError("Invalid password")

    token = create_access_token(data={"sub": "admin", "admin": True})
    logger.info("Admin login succeeded", extra={"ip": client_ip})
    return AdminTokenResponse(token=token)


@router.get("/verify", response_model=TokenVerifyResponse)
async def verify(current_admin: dict = Depends(require_admin)):
    """Check the bearer token's signature and expiry."""
    return TokenVerifyResponse(valid=True)
