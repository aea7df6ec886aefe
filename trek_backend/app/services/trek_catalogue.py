"""
Trek catalogue service.

Holds the one multi-statement write of the application: deleting a trek
together with its bookings inside a single transaction.
"""

import logging
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from trek_backend.app.core.exceptions import ConflictError, ResourceNotFoundError
from trek_backend.app.models.booking import Booking
from trek_backend.app.models.trek import Trek

logger = logging.getLogger(__name__)


async def get_trek_or_404(db: AsyncSession, trek_id: int) -> Trek:
    result = await db.execute(select(Trek).where(Trek.id == trek_id))
    trek = result.scalar_one_or_none()
    if trek is None:
        raise ResourceNotFoundError("Trek", trek_id)
    return trek


async def create_trek(db: AsyncSession, **fields) -> Trek:
    """
    Insert a trek.

    Raises:
        ConflictError: 409 if a trek with the same name exists
    """
    trek = Trek(**fields)
    db.add(trek)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("A trek with this name already exists")
    await db.refresh(trek)
    logger.info("Trek created", extra={"trek_id": trek.id})
    return trek


async def _delete_bookings_for_trek(db: AsyncSession, trek_id: int) -> int:
    result = await db.execute(delete(Booking).where(Booking.trek_id == trek_id))
    return result.rowcount


async def _delete_trek_row(db: AsyncSession, trek_id: int) -> None:
    await db.execute(delete(Trek).where(Trek.id == trek_id))


async def delete_trek_with_bookings(db: AsyncSession, trek_id: int) -> int:
    """
    Delete a trek and every booking referencing it, atomically.

    begin -> delete bookings -> delete trek -> commit; any error rolls the
    whole transaction back and is re-raised.

    Returns:
        Number of bookings removed

    Raises:
        ResourceNotFoundError: 404 if the trek does not exist
    """
    exists = await db.execute(select(func.count()).select_from(Trek).where(Trek.id == trek_id))
    if not exists.scalar_one():
        raise ResourceNotFoundError("Trek", trek_id)

    try:
        removed = await _delete_bookings_for_trek(db, trek_id)
        await _delete_trek_row(db, trek_id)
        await db.commit()
    except Exception:
        await db.rollback()
        logger.warning("Trek deletion rolled back", extra={"trek_id": trek_id})
        raise

    logger.info("Trek deleted", extra={"trek_id": trek_id, "bookings_removed": removed})
    return removed
