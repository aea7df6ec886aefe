"""
Gallery API endpoints.
"""

from fastapi import APIRouter, Depends
from typing import List

from trek_backend.app.core.dependencies import require_admin
from trek_backend.app.schemas.gallery import GalleryUpdate
from trek_backend.app.schemas.trek import MessageResponse
from trek_backend.app.services.gallery import GalleryStore, get_gallery_store

router = APIRouter(prefix="/gallery", tags=["Gallery"])


@router.get("", response_model=List[str])
def get_gallery(store: GalleryStore = Depends(get_gallery_store)):
    """Six gallery image URLs (empty strings for unset slots)."""
    return store.load()


@router.post("", response_model=MessageResponse)
def update_gallery(
    payload: GalleryUpdate,
    current_admin: dict = Depends(require_admin),
    store: GalleryStore = Depends(get_gallery_store)
):
    """Replace all six gallery images (admin only)."""
    store.replace(payload.images)
    return MessageResponse(message="Gallery updated.")
