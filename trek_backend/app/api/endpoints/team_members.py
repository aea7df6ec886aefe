"""
Team member ("Week Heroes") API endpoints.

The list is public; editing a member card requires the admin token.
"""

import logging
from fastapi import APIRouter, Depends, Path
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from trek_backend.app.core.dependencies import require_admin
from trek_backend.app.core.exceptions import ResourceNotFoundError
from trek_backend.app.db.session import get_db
from trek_backend.app.models.team_member import TeamMember
from trek_backend.app.schemas.team_member import TeamMemberResponse, TeamMemberUpdate
from trek_backend.app.schemas.trek import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/team-members", tags=["Team Members"])


@router.get("", response_model=List[TeamMemberResponse])
async def list_team_members(db: AsyncSession = Depends(get_db)):
    """Members in display order."""
    result = await db.execute(
        select(TeamMember).order_by(TeamMember.display_order, TeamMember.id)
    )
    return result.scalars().all()


@router.put("/{member_id}", response_model=MessageResponse)
async def update_team_member(
    payload: TeamMemberUpdate,
    member_id: int = Path(..., description="Team member ID"),
    current_admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    result = await db.execute(select(TeamMember).where(TeamMember.id == member_id))
    member = result.scalar_one_or_none()
    if member is None:
        raise ResourceNotFoundError("Team member", member_id)

    member.name = payload.name
    member.role = payload.role
    member.image_url = payload.image_url
    member.instagram_url = payload.instagram_url
    await db.commit()

    logger.info("Team member updated", extra={"member_id": member_id})
    return MessageResponse(message="Team member updated successfully")
