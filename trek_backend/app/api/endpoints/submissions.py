"""
Public submission endpoints: feedback, business queries and the contact form.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from trek_backend.app.core.dependencies import require_admin
from trek_backend.app.db.session import get_db
from trek_backend.app.models.submission import BusinessQuery, Feedback
from trek_backend.app.schemas.submission import (
    BusinessQueryCreate, BusinessQueryResponse, FeedbackCreate,
    FeedbackResponse, SubmissionCreatedResponse
)

router = APIRouter(tags=["Submissions"])


@router.get("/feedback", response_model=List[FeedbackResponse])
async def list_feedback(db: AsyncSession = Depends(get_db)):
    """All feedback entries, latest first."""
    result = await db.execute(
        select(Feedback).order_by(Feedback.created_at.desc(), Feedback.id.desc())
    )
    return result.scalars().all()


@router.post("/feedback", response_model=SubmissionCreatedResponse, status_code=status.HTTP_201_CREATED)
async def submit_feedback(payload: FeedbackCreate, db: AsyncSession = Depends(get_db)):
    """Save feedback; empty text or more than 100 words is rejected."""
    entry = Feedback(feedback=payload.feedback)
    db.add(entry)
    await db.commit()
    await db.refresh(entry)
    return SubmissionCreatedResponse(message="Feedback submitted successfully.", id=entry.id)


@router.get("/business-queries", response_model=List[BusinessQueryResponse])
async def list_business_queries(
    current_admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    result = await db.execute(select(BusinessQuery).order_by(BusinessQuery.id.desc()))
    return result.scalars().all()


async def _save_business_query(db: AsyncSession, payload: BusinessQueryCreate) -> BusinessQuery:
    query = BusinessQuery(
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        message=payload.message
    )
    db.add(query)
    await db.commit()
    await db.refresh(query)
    return query


@router.post("/business-queries", response_model=SubmissionCreatedResponse, status_code=status.HTTP_201_CREATED)
async def submit_business_query(payload: BusinessQueryCreate, db: AsyncSession = Depends(get_db)):
    query = await _save_business_query(db, payload)
    return SubmissionCreatedResponse(message="Query submitted successfully.", id=query.id)


@router.post("/contact", response_model=SubmissionCreatedResponse, status_code=status.HTTP_201_CREATED)
async def submit_contact_form(payload: BusinessQueryCreate, db: AsyncSession = Depends(get_db)):
    """Contact form; stored alongside business queries."""
    query = await _save_business_query(db, payload)
    return SubmissionCreatedResponse(message="Contact form submitted successfully", id=query.id)
