"""
Admin session client tests.

The client talks to the real app through ``ASGITransport``; time is driven
by a fake clock so inactivity can be simulated without waiting.
"""

import asyncio
import httpx
import pytest
from httpx import ASGITransport

from trek_backend.app.main import app
from trek_backend.app.core.config import settings
from trek_backend.app.client.admin_session import (
    AdminSessionClient,
    AdminSessionContext,
    SessionExpiredError,
    INACTIVE_TIMEOUT_SECONDS,
)


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
async def session_client(clock):
    expired = []
    client = AdminSessionClient(
        "http://test",
        on_expired=expired.append,
        transport=ASGITransport(app=app),
        context=AdminSessionContext(clock=clock),
    )
    client.expired = expired
    yield client
    await client.close()


@pytest.mark.asyncio
async def test_login_and_authenticated_request(session_client):
    await session_client.login(settings.admin_password)
    assert session_client.token is not None
    assert await session_client.verify() is True

    response = await session_client.request("GET", "/bookings")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_inactive_session_blocks_request(session_client, clock):
    await session_client.login(settings.admin_password)
    clock.advance(INACTIVE_TIMEOUT_SECONDS + 1)

    with pytest.raises(SessionExpiredError):
        await session_client.request("GET", "/bookings")

    assert session_client.token is None
    assert session_client.expired == ["Session expired due to inactivity"]


@pytest.mark.asyncio
async def test_activity_keeps_session_alive(session_client, clock):
    await session_client.login(settings.admin_password)
    clock.advance(INACTIVE_TIMEOUT_SECONDS - 10)
    session_client.context.record_activity("keydown")
    clock.advance(INACTIVE_TIMEOUT_SECONDS - 10)

    response = await session_client.request("GET", "/bookings")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_unauthorized_response_clears_token(session_client):
    session_client.context.set_token("forged-token")

    response = await session_client.request("GET", "/bookings")

    assert response.status_code == 401
    assert session_client.token is None
    assert session_client.expired == ["Token expired"]


@pytest.mark.asyncio
async def test_verify_invalid_token(session_client):
    session_client.context.set_token("forged-token")
    assert await session_client.verify() is False
    assert session_client.token is None


@pytest.mark.asyncio
async def test_request_without_login(session_client):
    with pytest.raises(SessionExpiredError):
        await session_client.request("GET", "/bookings")


@pytest.mark.asyncio
async def test_background_inactivity_check(clock):
    expired = []

    async def on_expired(reason):
        expired.append(reason)

    client = AdminSessionClient(
        "http://test",
        on_expired=on_expired,
        transport=ASGITransport(app=app),
        context=AdminSessionContext(clock=clock),
        token_check_interval=3600,
        inactivity_check_interval=0.01,
    )
    try:
        await client.login(settings.admin_password)
        client.start()
        clock.advance(INACTIVE_TIMEOUT_SECONDS + 1)
        for _ in range(50):
            if expired:
                break
            await asyncio.sleep(0.01)
    finally:
        await client.close()

    assert expired == ["Session expired due to inactivity"]
    assert client.token is None


def test_mousemove_is_throttled(clock):
    context = AdminSessionContext(clock=clock)

    assert context.record_activity("mousemove") is True
    clock.advance(0.5)
    assert context.record_activity("mousemove") is False
    clock.advance(0.6)
    assert context.record_activity("mousemove") is True
    assert context.record_activity("click") is True


def test_untracked_events_are_ignored(clock):
    context = AdminSessionContext(clock=clock)
    before = context.last_activity
    clock.advance(30)
    assert context.record_activity("resize") is False
    assert context.last_activity == before


def test_visibility_counts_as_activity(clock):
    context = AdminSessionContext(clock=clock)
    clock.advance(INACTIVE_TIMEOUT_SECONDS + 1)
    assert context.is_inactive()
    context.visibility_regained()
    assert not context.is_inactive()


def _failing_client(clock, handler):
    expired = []
    client = AdminSessionClient(
        "http://test",
        on_expired=expired.append,
        transport=httpx.MockTransport(handler),
        context=AdminSessionContext(clock=clock),
    )
    client.context.set_token("issued-token")
    return client, expired


@pytest.mark.asyncio
async def test_verify_network_failure_ends_session(clock):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client, expired = _failing_client(clock, handler)
    try:
        assert await client.verify() is False
    finally:
        await client.close()

    assert client.token is None
    assert expired == ["Token verification failed"]


@pytest.mark.asyncio
async def test_verify_server_error_ends_session(clock):
    def handler(request):
        return httpx.Response(500, json={"error_code": "ERR_INTERNAL_SERVER"})

    client, expired = _failing_client(clock, handler)
    try:
        assert await client.verify() is False
    finally:
        await client.close()

    assert client.token is None
    assert expired == ["Token expired"]
