"""
Booking API endpoints.

The public booking form creates bookings; listing and deleting them is
admin only.
"""

import logging
from fastapi import APIRouter, Depends, Path, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from trek_backend.app.core.dependencies import require_admin
from trek_backend.app.core.exceptions import ResourceNotFoundError
from trek_backend.app.db.session import get_db
from trek_backend.app.models.booking import Booking
from trek_backend.app.schemas.booking import BookingCreate, BookingCreatedResponse, BookingResponse
from trek_backend.app.schemas.trek import MessageResponse
from trek_backend.app.services.trek_catalogue import get_trek_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.get("", response_model=List[BookingResponse])
async def list_bookings(
    current_admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Get all bookings, newest first (admin only)."""
    result = await db.execute(select(Booking).order_by(Booking.id.desc()))
    return result.scalars().all()


@router.post("", response_model=BookingCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Create a booking from the public form.

    The referenced trek must exist (404 otherwise).
    """
    await get_trek_or_404(db, booking_data.trek_id)

    booking = Booking(
        trek_id=booking_data.trek_id,
        trek_name=booking_data.trek_name,
        full_name=booking_data.full_name,
        contact=booking_data.contact,
        email=booking_data.email,
        group_size=booking_data.group_size,
        notes=booking_data.notes
    )
    db.add(booking)
    await db.commit()
    await db.refresh(booking)

    logger.info("Booking created", extra={"booking_id": booking.id, "trek_id": booking.trek_id})
    return BookingCreatedResponse(message="Booking created successfully", booking_id=booking.id)


@router.delete("/{booking_id}", response_model=MessageResponse)
async def delete_booking(
    booking_id: int = Path(..., description="Booking ID"),
    current_admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    result = await db.execute(select(Booking).where(Booking.id == booking_id))
    booking = result.scalar_one_or_none()
    if booking is None:
        raise ResourceNotFoundError("Booking", booking_id)

    await db.delete(booking)
    await db.commit()
    return MessageResponse(message="Booking deleted")
