"""
GPS live-tracking service.

Per trek, tracking is either inactive or active:

    inactive --activate / first location--> active
    active   --activate / location-------> active   (session updated in place)
    active   --stop----------------------> inactive (history kept)

The session in force is the one ``TrekTrackingState.current_live_trek_id``
points at. Opening a session while the current one is inactive appends a
new ``LiveTrek`` row and moves the pointer, so older sessions stay as
history and never leak into "current" reads.
"""

import logging
import secrets
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from trek_backend.app.core.exceptions import ConfigurationError
from trek_backend.app.models.live_trek import (
    GpsConfig, LiveTrek, LiveTrekSettings, TrekLocation, TrekTrackingState
)
from trek_backend.app.models.trek import Trek
from trek_backend.app.schemas.gps import DEFAULT_STOP_MESSAGE
from trek_backend.app.services.trek_catalogue import get_trek_or_404

logger = logging.getLogger(__name__)

DRIVER_PASSWORD_KEY = "driver_password"
DRIVER_PASSWORD_DESCRIPTION = "Driver panel access password"
LOCATION_HISTORY_LIMIT = 100


def _now() -> datetime:
    return datetime.now(timezone.utc)


async def get_tracking_state(db: AsyncSession, trek_id: int) -> Optional[TrekTrackingState]:
    result = await db.execute(
        select(TrekTrackingState).where(TrekTrackingState.trek_id == trek_id)
    )
    return result.scalar_one_or_none()


async def get_current_session(
    db: AsyncSession,
    trek_id: int,
    state: Optional[TrekTrackingState] = None
) -> Optional[LiveTrek]:
    """Return the session the tracking state points at, if any."""
    if state is None:
        state = await get_tracking_state(db, trek_id)
    if state is None or state.current_live_trek_id is None:
        return None
    result = await db.execute(
        select(LiveTrek).where(LiveTrek.id == state.current_live_trek_id)
    )
    return result.scalar_one_or_none()


async def _open_session(
    db: AsyncSession,
    trek_id: int,
    state: Optional[TrekTrackingState],
    now: datetime
) -> Tuple[LiveTrek, TrekTrackingState]:
    """Append a new active session and make it current."""
    session = LiveTrek(trek_id=trek_id, is_active=True, active_since=now)
    db.add(session)
    await db.flush()

    if state is None:
        state = TrekTrackingState(trek_id=trek_id, current_live_trek_id=session.id)
        db.add(state)
    else:
        state.current_live_trek_id = session.id
    await db.flush()

    return session, state


async def _active_session(
    db: AsyncSession,
    trek_id: int,
    now: datetime
) -> Tuple[LiveTrek, TrekTrackingState, bool]:
    """Current session if active, otherwise a newly opened one."""
    state = await get_tracking_state(db, trek_id)
    session = await get_current_session(db, trek_id, state) if state is not None else None
    if session is not None and session.is_active:
        return session, state, False
    session, state = await _open_session(db, trek_id, state, now)
    return session, state, True


async def _retry_on_state_race(db: AsyncSession, trek_id: int, operation, *args, **kwargs):
    """
    Run ``operation`` once more if it lost the race to create a trek's
    tracking state row.

    Two first pings for an untracked trek both try to insert the same
    ``trek_tracking_state`` key; the loser rolls back and retries against the
    row the winner created.
    """
    try:
        return await operation(db, trek_id, *args, **kwargs)
    except IntegrityError:
        await db.rollback()
        logger.info("Tracking state created concurrently, retrying", extra={"trek_id": trek_id})
        return await operation(db, trek_id, *args, **kwargs)


async def _upsert_trek_settings(db: AsyncSession, trek_id: int, tracking_password: str) -> LiveTrekSettings:
    result = await db.execute(
        select(LiveTrekSettings).where(LiveTrekSettings.trek_id == trek_id)
    )
    trek_settings = result.scalar_one_or_none()
    if trek_settings is None:
        trek_settings = LiveTrekSettings(
            trek_id=trek_id,
            tracking_password=tracking_password,
            chat_enabled=True,
            chat_locked=False
        )
        db.add(trek_settings)
    else:
        trek_settings.tracking_password = tracking_password
    return trek_settings


async def activate_trek(
    db: AsyncSession,
    trek_id: int,
    google_maps_link: str,
    trek_password: str,
    driver_name: str
) -> LiveTrek:
    """
    Turn a trek live, or refresh an already live one.

    Re-activating overwrites link, driver, password and the activity
    timestamps of the current session.
    """
    return await _retry_on_state_race(
        db, trek_id, _activate_trek, google_maps_link, trek_password, driver_name
    )


async def _activate_trek(
    db: AsyncSession,
    trek_id: int,
    google_maps_link: str,
    trek_password: str,
    driver_name: str
) -> LiveTrek:
    await get_trek_or_404(db, trek_id)
    now = _now()

    session, _, opened = await _active_session(db, trek_id, now)
    session.google_maps_link = google_maps_link
    session.driver_id = driver_name
    session.status_message = None
    session.active_since = now
    session.last_location_update = now

    await _upsert_trek_settings(db, trek_id, trek_password)
    await db.commit()
    await db.refresh(session)

    logger.info(
        "Trek activated",
        extra={"trek_id": trek_id, "live_trek_id": session.id, "new_session": opened}
    )
    return session


async def record_location(
    db: AsyncSession,
    trek_id: int,
    latitude: float,
    longitude: float,
    accuracy: Optional[float] = None,
    altitude: Optional[float] = None,
    speed: Optional[float] = None,
    heading: Optional[float] = None
) -> LiveTrek:
    """
    Append a GPS ping.

    A trek without an active session is activated implicitly, so callers
    can start broadcasting without going through ``activate_trek``.
    """
    return await _retry_on_state_race(
        db, trek_id, _record_location, latitude, longitude,
        accuracy=accuracy, altitude=altitude, speed=speed, heading=heading
    )


async def _record_location(
    db: AsyncSession,
    trek_id: int,
    latitude: float,
    longitude: float,
    accuracy: Optional[float] = None,
    altitude: Optional[float] = None,
    speed: Optional[float] = None,
    heading: Optional[float] = None
) -> LiveTrek:
    await get_trek_or_404(db, trek_id)
    now = _now()

    session, state, opened = await _active_session(db, trek_id, now)
    if opened:
        logger.info(
            "Tracking session opened by location update",
            extra={"trek_id": trek_id, "live_trek_id": session.id}
        )

    location = TrekLocation(
        trek_id=trek_id,
        latitude=latitude,
        longitude=longitude,
        accuracy=accuracy,
        altitude=altitude,
        speed=speed,
        heading=heading,
        timestamp=now
    )
    db.add(location)
    await db.flush()

    state.last_location_id = location.id
    session.last_location_update = now

    await db.commit()
    await db.refresh(session)
    return session


async def stop_tracking(db: AsyncSession, trek_id: int, stop_message: Optional[str] = None) -> Optional[LiveTrek]:
    """
    Mark the current session inactive with a final status message.

    Location history is left in place. Stopping an untracked or already
    stopped trek only updates the message, if there is a session at all.
    """
    await get_trek_or_404(db, trek_id)

    session = await get_current_session(db, trek_id)
    if session is None:
        return None

    was_active = session.is_active
    session.is_active = False
    session.status_message = stop_message or DEFAULT_STOP_MESSAGE

    await db.commit()
    await db.refresh(session)

    logger.info(
        "Trek tracking stopped",
        extra={"trek_id": trek_id, "live_trek_id": session.id, "was_active": was_active}
    )
    return session


async def list_active_treks(db: AsyncSession) -> List[Dict]:
    """Treks whose current session is active, with their latest position."""
    result = await db.execute(
        select(
            Trek.id,
            Trek.name,
            LiveTrek.is_active,
            LiveTrek.last_location_update,
            LiveTrek.driver_id,
            TrekLocation.latitude,
            TrekLocation.longitude,
            TrekLocation.accuracy,
        )
        .join(TrekTrackingState, TrekTrackingState.trek_id == Trek.id)
        .join(LiveTrek, LiveTrek.id == TrekTrackingState.current_live_trek_id)
        .outerjoin(TrekLocation, TrekLocation.id == TrekTrackingState.last_location_id)
        .where(LiveTrek.is_active.is_(True))
        .order_by(LiveTrek.last_location_update.desc().nulls_last(), Trek.id)
    )

    return [
        {
            "id": row.id,
            "name": row.name,
            "is_active": bool(row.is_active),
            "last_location_time": row.last_location_update,
            "driver_name": row.driver_id,
            "latitude": row.latitude,
            "longitude": row.longitude,
            "accuracy": row.accuracy,
        }
        for row in result.all()
    ]


async def list_driver_treks(db: AsyncSession) -> List[Dict]:
    """Every trek with its current session metadata, active ones first."""
    is_active = func.coalesce(LiveTrek.is_active, False)
    result = await db.execute(
        select(
            Trek.id,
            Trek.name,
            is_active.label("is_active"),
            LiveTrek.last_location_update,
            LiveTrek.driver_id,
            LiveTrek.status_message,
            LiveTrek.created_at,
        )
        .outerjoin(TrekTrackingState, TrekTrackingState.trek_id == Trek.id)
        .outerjoin(LiveTrek, LiveTrek.id == TrekTrackingState.current_live_trek_id)
        .order_by(is_active.desc(), Trek.name.asc())
    )

    return [
        {
            "id": row.id,
            "name": row.name,
            "is_active": bool(row.is_active),
            "last_location_time": row.last_location_update,
            "driver_name": row.driver_id,
            "stop_message": row.status_message,
            "live_trek_created": row.created_at,
        }
        for row in result.all()
    ]


async def get_location_history(
    db: AsyncSession,
    trek_id: int,
    limit: int = LOCATION_HISTORY_LIMIT
) -> List[TrekLocation]:
    """Most recent pings first, capped at ``limit``."""
    await get_trek_or_404(db, trek_id)
    result = await db.execute(
        select(TrekLocation)
        .where(TrekLocation.trek_id == trek_id)
        .order_by(TrekLocation.timestamp.desc(), TrekLocation.id.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def get_trek_details(db: AsyncSession, trek_id: int) -> Dict:
    trek = await get_trek_or_404(db, trek_id)
    session = await get_current_session(db, trek_id)

    return {
        "id": trek.id,
        "name": trek.name,
        "google_maps_link": session.google_maps_link if session else None,
        "is_active": bool(session.is_active) if session else False,
        "last_location_update": session.last_location_update if session else None,
        "driver_id": session.driver_id if session else None,
        "status_message": session.status_message if session else None,
    }


def _passwords_match(submitted: str, stored: str) -> bool:
    # Plaintext comparison against the stored value
    return secrets.compare_digest(submitted.encode("utf-8"), stored.encode("utf-8"))


async def verify_driver_password(db: AsyncSession, password: str) -> bool:
    result = await db.execute(
        select(GpsConfig.config_value).where(GpsConfig.config_key == DRIVER_PASSWORD_KEY)
    )
    stored = result.scalar_one_or_none()
    if stored is None:
        raise ConfigurationError("Driver password not configured")
    return _passwords_match(password, stored)


async def verify_trek_password(db: AsyncSession, trek_id: int, password: str) -> Tuple[bool, Optional[str]]:
    """
    Check a viewer password for one trek's live feed.

    Returns:
        (valid, error) where error is set when the trek is not live
    """
    session = await get_current_session(db, trek_id)
    if session is None or not session.is_active:
        return False, "Trek not active"

    result = await db.execute(
        select(LiveTrekSettings.tracking_password).where(LiveTrekSettings.trek_id == trek_id)
    )
    stored = result.scalar_one_or_none()
    if stored is None:
        return False, "Trek not active"

    return _passwords_match(password, stored), None


async def get_gps_config(db: AsyncSession) -> Dict[str, str]:
    result = await db.execute(select(GpsConfig).order_by(GpsConfig.config_key))
    return {item.config_key: item.config_value for item in result.scalars().all()}


async def set_gps_config_value(db: AsyncSession, key: str, value: str, description: Optional[str] = None) -> GpsConfig:
    """Insert or update one configuration entry (not committed)."""
    result = await db.execute(select(GpsConfig).where(GpsConfig.config_key == key))
    item = result.scalar_one_or_none()
    if item is None:
        item = GpsConfig(config_key=key, config_value=value, description=description)
        db.add(item)
    else:
        item.config_value = value
        if description:
            item.description = description
    return item


async def update_gps_config(db: AsyncSession, driver_password: Optional[str] = None) -> None:
    if driver_password:
        await set_gps_config_value(
            db, DRIVER_PASSWORD_KEY, driver_password, DRIVER_PASSWORD_DESCRIPTION
        )
        await db.commit()
        logger.info("Driver password updated")
