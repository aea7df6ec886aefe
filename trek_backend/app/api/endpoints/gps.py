"""
GPS Live-Tracking API Endpoints.

Driver panel: activate a trek, stream locations, stop sharing.
Viewers: poll active treks, location history and trek details, gated by
a per-trek tracking password.
"""

from fastapi import APIRouter, Body, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict, List, Optional

from trek_backend.app.core.dependencies import require_admin
from trek_backend.app.db.session import get_db
from trek_backend.app.schemas.gps import (
    ActiveTrekRow, DriverPasswordCheck, DriverTrekRow, GpsConfigUpdate,
    LocationSubmit, LocationSubmitResponse, PasswordCheckResponse,
    SuccessResponse, TrekActivate, TrekDetailsResponse, TrekLocationResponse,
    TrekPasswordCheck, TrekStop
)
from trek_backend.app.services import live_tracking

router = APIRouter(prefix="/gps", tags=["GPS Live Tracking"])


@router.get("/driver-treks", response_model=List[DriverTrekRow])
async def get_driver_treks(db: AsyncSession = Depends(get_db)):
    """All treks with their current tracking session, active first."""
    return await live_tracking.list_driver_treks(db)


@router.get("/active-treks", response_model=List[ActiveTrekRow])
async def get_active_treks(db: AsyncSession = Depends(get_db)):
    """Treks currently broadcasting, each with its latest position."""
    return await live_tracking.list_active_treks(db)


@router.post("/trek-location", response_model=LocationSubmitResponse)
async def submit_location(location: LocationSubmit, db: AsyncSession = Depends(get_db)):
    """
    Record a GPS ping.

    Opens an active session if the trek has none.
    """
    session = await live_tracking.record_location(
        db,
        trek_id=location.trek_id,
        latitude=location.latitude,
        longitude=location.longitude,
        accuracy=location.accuracy,
        altitude=location.altitude,
        speed=location.speed,
        heading=location.heading
    )
    return LocationSubmitResponse(success=True, live_trek_id=session.id)


@router.get("/trek-locations/{trek_id}", response_model=List[TrekLocationResponse])
async def get_trek_locations(
    trek_id: int = Path(..., description="Trek ID"),
    db: AsyncSession = Depends(get_db)
):
    """Up to 100 most recent pings, newest first."""
    return await live_tracking.get_location_history(db, trek_id)


@router.get("/trek-details/{trek_id}", response_model=TrekDetailsResponse)
async def get_trek_details(
    trek_id: int = Path(..., description="Trek ID"),
    db: AsyncSession = Depends(get_db)
):
    return await live_tracking.get_trek_details(db, trek_id)


@router.post("/trek-location/{trek_id}/stop", response_model=SuccessResponse)
async def stop_sharing(
    trek_id: int = Path(..., description="Trek ID"),
    payload: Optional[TrekStop] = Body(None),
    db: AsyncSession = Depends(get_db)
):
    """Stop GPS sharing; location history is kept."""
    await live_tracking.stop_tracking(db, trek_id, payload.stop_message if payload else None)
    return SuccessResponse(success=True, message="GPS sharing stopped")


@router.post("/verify-driver-password", response_model=PasswordCheckResponse, response_model_exclude_none=True)
async def verify_driver_password(payload: DriverPasswordCheck, db: AsyncSession = Depends(get_db)):
    valid = await live_tracking.verify_driver_password(db, payload.password)
    return PasswordCheckResponse(valid=valid)


@router.post("/verify-trek-password", response_model=PasswordCheckResponse, response_model_exclude_none=True)
async def verify_trek_password(payload: TrekPasswordCheck, db: AsyncSession = Depends(get_db)):
    valid, error = await live_tracking.verify_trek_password(db, payload.trek_id, payload.password)
    return PasswordCheckResponse(valid=valid, error=error)


@router.post("/activate-trek", response_model=SuccessResponse)
async def activate_trek(payload: TrekActivate, db: AsyncSession = Depends(get_db)):
    """Turn a trek live with its maps link, viewer password and driver name."""
    await live_tracking.activate_trek(
        db,
        trek_id=payload.trek_id,
        google_maps_link=payload.google_maps_link,
        trek_password=payload.trek_password,
        driver_name=payload.driver_name
    )
    return SuccessResponse(success=True, message="Trek activated successfully")


@router.get("/config", response_model=Dict[str, str])
async def get_config(
    current_admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return await live_tracking.get_gps_config(db)


@router.put("/config", response_model=SuccessResponse)
async def update_config(
    payload: GpsConfigUpdate,
    current_admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    await live_tracking.update_gps_config(db, driver_password=payload.driver_password)
    return SuccessResponse(success=True, message="Configuration updated")
