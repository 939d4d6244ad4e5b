"""Tests for imagegallery.api.models — Pydantic request/response models."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from imagegallery.api.models import (
    CreateGalleryRequest,
    DeleteGalleryResponse,
    GalleryContentsResponse,
    GalleryOut,
    ImageOut,
)
from imagegallery.core.galleries import Gallery
from imagegallery.core.images import Image


class TestCreateGalleryRequest:
    def test_name(self):
        assert CreateGalleryRequest(name="Zoo").name == "Zoo"

    def test_name_optional(self):
        """A missing name is reported by the repository, not by the schema."""
        assert CreateGalleryRequest().name is None

    def test_non_string_name_rejected(self):
        with pytest.raises(ValidationError):
            CreateGalleryRequest(name=["Zoo"])


class TestDescriptors:
    def test_gallery_from_dataclass(self):
        out = GalleryOut.model_validate(Gallery(name="Wild animals", path="Wild%20animals"))
        assert out.model_dump() == {"path": "Wild%20animals", "name": "Wild animals"}

    def test_image_from_dataclass(self):
        modified = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        image = Image(path="cat.png", fullpath="Zoo/cat.png", name="cat", modified=modified)
        out = ImageOut.model_validate(image)
        data = out.model_dump(mode="json")
        assert data["fullpath"] == "Zoo/cat.png"
        assert data["name"] == "cat"
        assert data["modified"].startswith("2024-05-01T12:00:00")

    def test_contents_response(self):
        resp = GalleryContentsResponse(gallery=GalleryOut(path="Zoo", name="Zoo"), images=[])
        assert resp.model_dump() == {"gallery": {"path": "Zoo", "name": "Zoo"}, "images": []}

    def test_delete_response_default_code(self):
        assert DeleteGalleryResponse(success="ok").code == 200
