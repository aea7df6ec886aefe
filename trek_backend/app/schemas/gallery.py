"""
Gallery schemas: exactly six image URLs, replaced wholesale.
"""

from pydantic import BaseModel, Field, StrictStr
from typing import List

GALLERY_SIZE = 6


class GalleryUpdate(BaseModel):
    images: List[StrictStr] = Field(..., min_length=GALLERY_SIZE, max_length=GALLERY_SIZE)

    class Config:
        extra = "forbid"
