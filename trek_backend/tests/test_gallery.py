"""
Gallery file storage tests.
"""

import json
import pytest

from trek_backend.app.services.gallery import GalleryStore

IMAGES = [f"https://example.com/moment-{i}.jpg" for i in range(6)]


@pytest.mark.asyncio
async def test_missing_file_returns_empty_slots(client, gallery_file):
    assert not gallery_file.exists()
    response = await client.get("/api/gallery")
    assert response.status_code == 200
    assert response.json() == [""] * 6


@pytest.mark.asyncio
async def test_corrupt_file_returns_empty_slots(client, gallery_file):
    gallery_file.write_text("{not json", encoding="utf-8")
    response = await client.get("/api/gallery")
    assert response.json() == [""] * 6


@pytest.mark.asyncio
async def test_update_gallery(client, admin_headers, gallery_file):
    response = await client.post("/api/gallery", json={"images": IMAGES}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Gallery updated."

    assert json.loads(gallery_file.read_text(encoding="utf-8")) == IMAGES
    assert (await client.get("/api/gallery")).json() == IMAGES


@pytest.mark.asyncio
async def test_update_gallery_requires_admin(client, gallery_file):
    response = await client.post("/api/gallery", json={"images": IMAGES})
    assert response.status_code == 401
    assert not gallery_file.exists()


@pytest.mark.asyncio
@pytest.mark.parametrize("images", [
    IMAGES[:5],
    IMAGES + ["https://example.com/extra.jpg"],
    IMAGES[:5] + [42],
])
async def test_update_gallery_rejects_bad_payload(client, admin_headers, gallery_file, images):
    response = await client.post("/api/gallery", json={"images": images}, headers=admin_headers)
    assert response.status_code == 400
    assert not gallery_file.exists()


def test_store_replace_overwrites(tmp_path):
    store = GalleryStore(str(tmp_path / "nested" / "gallery.json"))
    store.replace(IMAGES)
    store.replace(list(reversed(IMAGES)))
    assert store.load() == list(reversed(IMAGES))


def test_store_rejects_wrong_size(tmp_path):
    store = GalleryStore(str(tmp_path / "gallery.json"))
    with pytest.raises(ValueError):
        store.replace(IMAGES[:2])
