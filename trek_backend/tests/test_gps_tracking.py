"""
GPS live-tracking tests.

Exercises the per-trek state machine through the HTTP API: implicit
activation on the first ping, explicit activation, stop with history kept,
and the polling reads that must only ever reflect the current session.
"""

import pytest

from trek_backend.app.models.live_trek import TrekTrackingState
from trek_backend.app.services import live_tracking

LOCATION = {"latitude": 19.6019, "longitude": 73.7090, "accuracy": 8.5}


async def _activate(client, trek_id, password="summit"):
    response = await client.post("/api/gps/activate-trek", json={
        "trek_id": trek_id,
        "google_maps_link": "https://maps.google.com/?q=19.6,73.7",
        "trek_password": password,
        "driver_name": "Santosh",
    })
    assert response.status_code == 200
    return response


async def _ping(client, trek_id, **overrides):
    body = {"trek_id": trek_id, **LOCATION, **overrides}
    response = await client.post("/api/gps/trek-location", json=body)
    assert response.status_code == 200
    return response.json()


@pytest.mark.asyncio
async def test_first_location_activates_trek(client, trek):
    result = await _ping(client, trek.id)
    assert result["success"] is True

    active = (await client.get("/api/gps/active-treks")).json()
    assert len(active) == 1
    assert active[0]["id"] == trek.id
    assert active[0]["is_active"] is True
    assert active[0]["latitude"] == pytest.approx(LOCATION["latitude"])
    assert active[0]["accuracy"] == pytest.approx(LOCATION["accuracy"])


@pytest.mark.asyncio
async def test_location_for_unknown_trek_returns_404(client):
    response = await client.post("/api/gps/trek-location", json={"trek_id": 404, **LOCATION})
    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("override", [
    {"latitude": 91},
    {"longitude": -181},
    {"heading": 400},
])
async def test_location_out_of_range(client, trek, override):
    response = await client.post("/api/gps/trek-location", json={"trek_id": trek.id, **LOCATION, **override})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_activate_then_details(client, trek):
    await _activate(client, trek.id)

    details = (await client.get(f"/api/gps/trek-details/{trek.id}")).json()
    assert details["is_active"] is True
    assert details["driver_id"] == "Santosh"
    assert details["google_maps_link"].startswith("https://maps.google.com")
    assert details["status_message"] is None


@pytest.mark.asyncio
async def test_activate_rejects_non_http_link(client, trek):
    response = await client.post("/api/gps/activate-trek", json={
        "trek_id": trek.id,
        "google_maps_link": "javascript:alert(1)",
        "trek_password": "summit",
        "driver_name": "Santosh",
    })
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_reactivation_updates_same_session(client, trek):
    await _activate(client, trek.id)
    first = await _ping(client, trek.id)

    await client.post("/api/gps/activate-trek", json={
        "trek_id": trek.id,
        "google_maps_link": "https://maps.google.com/?q=new",
        "trek_password": "changed",
        "driver_name": "Vikas",
    })
    second = await _ping(client, trek.id)

    assert first["live_trek_id"] == second["live_trek_id"]
    details = (await client.get(f"/api/gps/trek-details/{trek.id}")).json()
    assert details["driver_id"] == "Vikas"


@pytest.mark.asyncio
async def test_stop_keeps_history(client, trek):
    await _ping(client, trek.id)
    await _ping(client, trek.id, latitude=19.61)

    response = await client.post(
        f"/api/gps/trek-location/{trek.id}/stop", json={"stop_message": "Reached base village"}
    )
    assert response.status_code == 200
    assert response.json()["success"] is True

    assert (await client.get("/api/gps/active-treks")).json() == []

    history = (await client.get(f"/api/gps/trek-locations/{trek.id}")).json()
    assert len(history) == 2
    assert history[0]["latitude"] == pytest.approx(19.61)

    details = (await client.get(f"/api/gps/trek-details/{trek.id}")).json()
    assert details["is_active"] is False
    assert details["status_message"] == "Reached base village"


@pytest.mark.asyncio
async def test_stop_without_body_uses_default_message(client, trek):
    await _activate(client, trek.id)

    response = await client.post(f"/api/gps/trek-location/{trek.id}/stop")
    assert response.status_code == 200

    details = (await client.get(f"/api/gps/trek-details/{trek.id}")).json()
    assert details["status_message"] == "GPS tracking stopped"


@pytest.mark.asyncio
async def test_stop_unknown_trek_returns_404(client):
    response = await client.post("/api/gps/trek-location/999/stop")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_location_after_stop_opens_new_session(client, trek):
    first = await _ping(client, trek.id)
    await client.post(f"/api/gps/trek-location/{trek.id}/stop")

    second = await _ping(client, trek.id, latitude=19.7)

    assert second["live_trek_id"] != first["live_trek_id"]
    active = (await client.get("/api/gps/active-treks")).json()
    assert [t["id"] for t in active] == [trek.id]
    assert active[0]["latitude"] == pytest.approx(19.7)


@pytest.mark.asyncio
async def test_stopping_current_session_hides_older_ones(client, trek):
    """An older session never resurfaces once the current one stops."""
    await _ping(client, trek.id)
    await client.post(f"/api/gps/trek-location/{trek.id}/stop")
    await _activate(client, trek.id)
    await client.post(f"/api/gps/trek-location/{trek.id}/stop", json={"stop_message": "Done"})

    assert (await client.get("/api/gps/active-treks")).json() == []

    driver_rows = (await client.get("/api/gps/driver-treks")).json()
    assert driver_rows[0]["is_active"] is False
    assert driver_rows[0]["stop_message"] == "Done"


@pytest.mark.asyncio
async def test_driver_treks_lists_every_trek_active_first(client, admin_headers, trek, trek_payload):
    other = await client.post("/api/treks", json=trek_payload(name="Andharban"), headers=admin_headers)
    other_id = other.json()["id"]
    await _activate(client, other_id)

    rows = (await client.get("/api/gps/driver-treks")).json()
    assert [r["id"] for r in rows] == [other_id, trek.id]
    assert rows[0]["is_active"] is True
    assert rows[0]["driver_name"] == "Santosh"
    assert rows[1]["is_active"] is False
    assert rows[1]["driver_name"] is None


@pytest.mark.asyncio
async def test_history_is_capped_and_newest_first(client, trek):
    for i in range(105):
        await _ping(client, trek.id, latitude=10 + i * 0.01)

    history = (await client.get(f"/api/gps/trek-locations/{trek.id}")).json()
    assert len(history) == 100
    assert history[0]["latitude"] == pytest.approx(10 + 104 * 0.01)


@pytest.mark.asyncio
async def test_unknown_trek_reads_return_404(client):
    assert (await client.get("/api/gps/trek-details/999")).status_code == 404
    assert (await client.get("/api/gps/trek-locations/999")).status_code == 404


@pytest.mark.asyncio
async def test_trek_password(client, trek):
    inactive = await client.post("/api/gps/verify-trek-password", json={"trek_id": trek.id, "password": "summit"})
    assert inactive.json() == {"valid": False, "error": "Trek not active"}

    await _activate(client, trek.id, password="summit")

    ok = await client.post("/api/gps/verify-trek-password", json={"trek_id": trek.id, "password": "summit"})
    assert ok.json() == {"valid": True}

    wrong = await client.post("/api/gps/verify-trek-password", json={"trek_id": trek.id, "password": "nope"})
    assert wrong.json() == {"valid": False}


@pytest.mark.asyncio
async def test_driver_password_not_configured(client):
    response = await client.post("/api/gps/verify-driver-password", json={"password": "anything"})
    assert response.status_code == 500
    assert response.json()["error_code"] == "ERR_CONFIG"


@pytest.mark.asyncio
async def test_gps_config_roundtrip(client, admin_headers):
    assert (await client.get("/api/gps/config")).status_code == 401

    update = await client.put("/api/gps/config", json={"driver_password": "trail-2024"}, headers=admin_headers)
    assert update.status_code == 200

    config = (await client.get("/api/gps/config", headers=admin_headers)).json()
    assert config == {"driver_password": "trail-2024"}

    ok = await client.post("/api/gps/verify-driver-password", json={"password": "trail-2024"})
    assert ok.json()["valid"] is True
    wrong = await client.post("/api/gps/verify-driver-password", json={"password": "trail-2023"})
    assert wrong.json()["valid"] is False


@pytest.mark.asyncio
async def test_deleting_trek_removes_tracking_data(client, admin_headers, trek):
    await _ping(client, trek.id)

    response = await client.delete(f"/api/treks/{trek.id}", headers=admin_headers)
    assert response.status_code == 200
    assert (await client.get("/api/gps/active-treks")).json() == []


@pytest.mark.asyncio
async def test_first_ping_recovers_when_state_row_appears_concurrently(client, trek, db_session, mocker):
    """A tracking state row created by a parallel request is reused, not duplicated."""
    db_session.add(TrekTrackingState(trek_id=trek.id))
    await db_session.commit()

    real_get_state = live_tracking.get_tracking_state
    calls = []

    async def stale_first_read(db, trek_id):
        calls.append(trek_id)
        if len(calls) == 1:
            return None
        return await real_get_state(db, trek_id)

    mocker.patch.object(live_tracking, "get_tracking_state", side_effect=stale_first_read)

    result = await _ping(client, trek.id)

    assert result["success"] is True
    assert len(calls) >= 2
    active = (await client.get("/api/gps/active-treks")).json()
    assert [t["id"] for t in active] == [trek.id]
