"""
Admin session client.

Keeps an admin token alive against the API the way the dashboard does in
the browser: the token is re-verified periodically, and ten minutes
without user activity end the session. Expiry clears the stored token and
fires ``on_expired`` (the dashboard redirects to the login page there).
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional, Union

import httpx

logger = logging.getLogger(__name__)

INACTIVE_TIMEOUT_SECONDS = 10 * 60
TOKEN_CHECK_INTERVAL_SECONDS = 30
INACTIVITY_CHECK_INTERVAL_SECONDS = 60
MOUSEMOVE_THROTTLE_SECONDS = 1.0

ACTIVITY_EVENTS = frozenset(
    {"mousedown", "mousemove", "keydown", "scroll", "touchstart", "click"}
)

ExpiredCallback = Callable[[str], Union[None, Awaitable[None]]]


class SessionExpiredError(Exception):
    """Raised when a request is attempted on an expired or missing session."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class AdminSessionContext:
    """Token storage plus the user-activity clock."""

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        inactive_timeout: float = INACTIVE_TIMEOUT_SECONDS
    ):
        self._clock = clock
        self.inactive_timeout = inactive_timeout
        self.token: Optional[str] = None
        self.last_activity = clock()
        self._last_mousemove: Optional[float] = None

    def set_token(self, token: str):
        self.token = token
        self.last_activity = self._clock()

    def record_activity(self, event: str) -> bool:
        """
        Register a user interaction.

        Returns:
            bool: True if ``last_activity`` moved
        """
        if event not in ACTIVITY_EVENTS:
            return False

        now = self._clock()
        if event == "mousemove":
            if self._last_mousemove is not None and now - self._last_mousemove < MOUSEMOVE_THROTTLE_SECONDS:
                return False
            self._last_mousemove = now

        self.last_activity = now
        return True

    def visibility_regained(self):
        """Page became visible again; counts as activity."""
        self.last_activity = self._clock()

    def is_inactive(self) -> bool:
        return self._clock() - self.last_activity > self.inactive_timeout

    def clear(self):
        self.token = None


class AdminSessionClient:
    """
    Async HTTP client for the admin API.

    Args:
        base_url: Server root, e.g. ``http://localhost:3003``
        on_expired: Called with a reason when the session ends
        transport: Optional httpx transport (tests pass an ASGITransport)
        context: Optional pre-built session context
    """

    def __init__(
        self,
        base_url: str,
        on_expired: Optional[ExpiredCallback] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        context: Optional[AdminSessionContext] = None,
        api_prefix: str = "/api",
        token_check_interval: float = TOKEN_CHECK_INTERVAL_SECONDS,
        inactivity_check_interval: float = INACTIVITY_CHECK_INTERVAL_SECONDS
    ):
        self.context = context or AdminSessionContext()
        self.on_expired = on_expired
        self.api_prefix = api_prefix.rstrip("/")
        self.token_check_interval = token_check_interval
        self.inactivity_check_interval = inactivity_check_interval
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=10.0)
        self._tasks = []

    @property
    def token(self) -> Optional[str]:
        return self.context.token

    def _url(self, path: str) -> str:
        return f"{self.api_prefix}/{path.lstrip('/')}"

    async def _expire(self, reason: str):
        had_token = self.context.token is not None
        self.context.clear()
        logger.info("Admin session expired", extra={"reason": reason})
        if had_token and self.on_expired is not None:
            result = self.on_expired(reason)
            if asyncio.iscoroutine(result):
                await result

    async def login(self, password: str) -> str:
        response = await self._http.post(self._url("/admin/login"), json={"password": password})
        response.raise_for_status()
        token = response.json()["token"]
        self.context.set_token(token)
        return token

    async def verify(self) -> bool:
        """
        Ask the server whether the stored token is still valid.

        Any answer other than success, including a failure to reach the
        server, ends the session.
        """
        if self.context.token is None:
            return False
        try:
            response = await self._http.get(
                self._url("/admin/verify"),
                headers={"Authorization": f"Bearer {self.context.token}"}
            )
        except httpx.HTTPError as exc:
            logger.warning("Token verification failed to reach server", extra={"error": str(exc)})
            await self._expire("Token verification failed")
            return False

        if not response.is_success:
            await self._expire("Token expired")
            return False
        return True

    async def request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """
        Send an authenticated API request.

        The inactivity check runs first; an idle session is ended without
        sending anything. A 401 answer also ends the session.
        """
        if self.context.is_inactive():
            await self._expire("Session expired due to inactivity")
            raise SessionExpiredError("Session expired due to inactivity")
        if self.context.token is None:
            raise SessionExpiredError("Not logged in")

        headers = dict(kwargs.pop("headers", None) or {})
        headers["Authorization"] = f"Bearer {self.context.token}"
        response = await self._http.request(method, self._url(path), headers=headers, **kwargs)

        if response.status_code == 401:
            await self._expire("Token expired")
        return response

    async def _token_check_loop(self):
        while True:
            await asyncio.sleep(self.token_check_interval)
            if self.context.token is not None:
                await self.verify()

    async def _inactivity_loop(self):
        while True:
            await asyncio.sleep(self.inactivity_check_interval)
            if self.context.token is not None and self.context.is_inactive():
                await self._expire("Session expired due to inactivity")

    def start(self):
        """Start the token re-verification and inactivity timers."""
        if self._tasks:
            return
        self._tasks = [
            asyncio.create_task(self._token_check_loop()),
            asyncio.create_task(self._inactivity_loop()),
        ]

    async def stop(self):
        """Cancel both timers."""
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def close(self):
        await self.stop()
        await self._http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
