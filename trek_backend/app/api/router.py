"""
API Router.

Aggregates all endpoints mounted under ``/api``.
"""

from fastapi import APIRouter
from trek_backend.app.api.endpoints import (
    admin, bookings, gallery, gps, submissions, team_members, treks
)

router = APIRouter()

# Admin authentication
router.include_router(admin.router)

# Trek catalogue and bookings
router.include_router(treks.router)
router.include_router(bookings.router)

# Feedback, business queries, contact form
router.include_router(submissions.router)

# Trail Moments gallery
router.include_router(gallery.router)

# Week Heroes team cards
router.include_router(team_members.router)

# GPS live tracking
router.include_router(gps.router)
