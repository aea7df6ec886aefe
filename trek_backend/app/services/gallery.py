"""
Gallery storage.

The "Trail Moments" gallery is six image URLs kept in a flat JSON file
rather than a table. Reads never fail: a missing or unreadable file yields
six empty slots. Writes replace the whole file.
"""

import json
import logging
import os
import tempfile
from typing import List

from trek_backend.app.core.config import settings
from trek_backend.app.schemas.gallery import GALLERY_SIZE

logger = logging.getLogger(__name__)


def empty_gallery() -> List[str]:
    return [""] * GALLERY_SIZE


class GalleryStore:
    """Read/replace access to the gallery JSON file."""

    def __init__(self, path: str):
        self.path = path

    def load(self) -> List[str]:
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                images = json.load(fh)
        except FileNotFoundError:
            return empty_gallery()
        except (OSError, ValueError) as exc:
            logger.warning("Unreadable gallery file %s: %s", self.path, exc)
            return empty_gallery()

        if (
            isinstance(images, list)
            and len(images) == GALLERY_SIZE
            and all(isinstance(item, str) for item in images)
        ):
            return images
        return empty_gallery()

    def replace(self, images: List[str]) -> None:
        """Write ``images`` atomically over the previous gallery."""
        if len(images) != GALLERY_SIZE:
            raise ValueError(f"Gallery must hold exactly {GALLERY_SIZE} images")

        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(images, fh, indent=2)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
        logger.info("Gallery updated", extra={"path": self.path})


def get_gallery_store() -> GalleryStore:
    """FastAPI dependency returning the store for the configured path."""
    return GalleryStore(settings.gallery_path)
