"""
Reliability Utilities.

Fixed-window rate limiting: a global per-client request budget applied to
every route, and a stricter one for admin login attempts.
"""

import logging
import time
import threading
from typing import Callable, Dict, Tuple
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from trek_backend.app.core.config import settings
from trek_backend.app.core.exceptions import RateLimitExceededError, app_exception_handler

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Fixed-window rate limiter keyed by client address.

    At most ``max_attempts`` hits are allowed per key within ``window_seconds``;
    the window starts at the first hit and resets once it has elapsed.
    State is per process and is lost on restart.
    """
    def __init__(self, max_attempts: int, window_seconds: int, clock: Callable[[], float] = time.monotonic):
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: Dict[str, Tuple[float, int]] = {}
        self._lock = threading.Lock()

    def hit(self, key: str) -> Tuple[bool, int]:
        """
        Record one attempt for ``key``.

        Returns:
            (allowed, retry_after_seconds)
        """
        now = self._clock()
        with self._lock:
            window_start, count = self._hits.get(key, (now, 0))
            if now - window_start >= self.window_seconds:
                window_start, count = now, 0
            count += 1
            self._hits[key] = (window_start, count)

        if count > self.max_attempts:
            retry_after = int(self.window_seconds - (now - window_start)) + 1
            return False, retry_after
        return True, 0

    def reset(self):
        with self._lock:
            self._hits.clear()


# Global instance for the admin login endpoint
login_rate_limiter = RateLimiter(
    max_attempts=settings.login_rate_limit,
    window_seconds=settings.login_rate_window_seconds,
)

# Global instance for every other request
request_rate_limiter = RateLimiter(
    max_attempts=settings.request_rate_limit,
    window_seconds=settings.request_rate_window_seconds,
)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Answers 429 once a client address exceeds the global request budget."""

    async def dispatch(self, request: Request, call_next) -> Response:
        client_ip = request.client.host if request.client else "unknown"
        allowed, retry_after = request_rate_limiter.hit(client_ip)
        if not allowed:
            logger.warning("Request throttled", extra={"ip": client_ip, "path": request.url.path})
            return await app_exception_handler(
                request,
                RateLimitExceededError(
                    retry_after,
                    message="Too many requests from this IP, please try again later."
                )
            )
        return await call_next(request)
