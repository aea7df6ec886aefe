"""
Trek catalogue API endpoints.

Listing and reading are public; creating, editing and deleting treks
require the admin token.
"""

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from trek_backend.app.core.dependencies import require_admin
from trek_backend.app.db.session import get_db
from trek_backend.app.models.trek import Trek
from trek_backend.app.schemas.trek import (
    TrekCreate, TrekCreatedResponse, TrekImageUpdate, TrekPriceUpdate,
    TrekResponse, MessageResponse
)
from trek_backend.app.services.trek_catalogue import (
    create_trek, delete_trek_with_bookings, get_trek_or_404
)

router = APIRouter(prefix="/treks", tags=["Treks"])


@router.get("", response_model=List[TrekResponse])
async def list_treks(db: AsyncSession = Depends(get_db)):
    """Get all treks ordered by ID."""
    result = await db.execute(select(Trek).order_by(Trek.id))
    return result.scalars().all()


@router.get("/{trek_id}", response_model=TrekResponse)
async def get_trek(
    trek_id: int = Path(..., description="Trek ID"),
    db: AsyncSession = Depends(get_db)
):
    return await get_trek_or_404(db, trek_id)


@router.post("", response_model=TrekCreatedResponse, status_code=status.HTTP_201_CREATED)
async def add_trek(
    trek_data: TrekCreate,
    current_admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Add a trek to the catalogue (admin only).

    Returns 400 with an itemized error list when any field is missing or
    invalid, 409 when the name is already taken.
    """
    trek = await create_trek(db, **trek_data.model_dump())
    return TrekCreatedResponse(
        message="Trek added successfully",
        id=trek.id,
        trek=TrekResponse.model_validate(trek)
    )


@router.patch("/{trek_id}/price", response_model=MessageResponse)
async def update_price(
    payload: TrekPriceUpdate,
    trek_id: int = Path(..., description="Trek ID"),
    current_admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    trek = await get_trek_or_404(db, trek_id)
    trek.price = payload.price
    await db.commit()
    return MessageResponse(message="Price updated")


@router.patch("/{trek_id}/image", response_model=MessageResponse)
async def update_image(
    payload: TrekImageUpdate,
    trek_id: int = Path(..., description="Trek ID"),
    current_admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    trek = await get_trek_or_404(db, trek_id)
    trek.image = payload.image
    await db.commit()
    return MessageResponse(message="Image updated")


@router.delete("/{trek_id}", response_model=MessageResponse)
async def delete_trek(
    trek_id: int = Path(..., description="Trek ID"),
    current_admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Delete a trek and its bookings in one transaction (admin only)."""
    await delete_trek_with_bookings(db, trek_id)
    return MessageResponse(message="Trek deleted")
