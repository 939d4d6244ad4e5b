"""Image repository: images are regular files inside a gallery directory.

Uploads overwrite silently (last write wins) and there is no versioning.
Resized derivatives produced by :mod:`imagegallery.core.resize` live beside
their source but are not reported by :meth:`ImageRepository.list_images`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from imagegallery.core.errors import MISSING_FILE, NotFound, ValidationError
from imagegallery.core.galleries import GalleryRepository
from imagegallery.core.naming import (
    encode_segment,
    is_derivative,
    is_utf8_name,
    logical_name,
    validate_segment,
)
from imagegallery.core.store import FilesystemStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Image:
    """A stored image file.

    Attributes:
        path: File name including extension.
        fullpath: Encoded gallery path joined with the file name.
        name: Logical name (file name up to the first ``.``).
        modified: Last modification time of the file (UTC).
    """

    path: str
    fullpath: str
    name: str
    modified: datetime


class ImageRepository:
    """List, upload and delete images within galleries."""

    def __init__(
        self,
        store: FilesystemStore,
        galleries: GalleryRepository,
        derivative_suffix: str = "-resized",
    ):
        self.store = store
        self.galleries = galleries
        self.derivative_suffix = derivative_suffix

    def _describe(self, gallery: str, file_name: str, modified: datetime) -> Image:
        return Image(
            path=file_name,
            fullpath=f"{encode_segment(gallery)}/{file_name}",
            name=logical_name(file_name),
            modified=modified,
        )

    def list_images(self, gallery: str) -> list[Image]:
        """Return the images of a gallery, sorted by file name.

        Subdirectories, resized derivatives and files whose names are not
        valid UTF-8 are left out.

        Raises:
            NotFound: The gallery does not exist.
        """
        self.galleries.get_gallery(gallery)

        images = []
        for entry in sorted(self.store.list_entries(gallery)):
            if is_derivative(entry, self.derivative_suffix):
                continue
            if not is_utf8_name(entry):
                logger.warning(f"Skipping non-UTF-8 file name in gallery '{gallery}': {entry!r}")
                continue
            try:
                stat = self.store.stat(f"{gallery}/{entry}")
            except NotFound:
                continue
            if stat.is_directory:
                continue
            images.append(self._describe(gallery, entry, stat.modified_at))
        return images

    def contains(self, gallery: str, file_name: str) -> bool:
        """Whether *file_name* is currently among the gallery's entries.

        The directory is enumerated on every call; nothing is cached.

        Raises:
            NotFound: The gallery does not exist.
        """
        self.galleries.get_gallery(gallery)
        validate_segment(file_name, "img")
        return file_name in self.store.list_entries(gallery)

    def upload_image(self, gallery: str, file_name: str | None, data: bytes | None) -> Image:
        """Store an uploaded file in a gallery, replacing any same-named file.

        Raises:
            ValidationError: No file was supplied, or its name is unsafe.
            NotFound: The gallery does not exist.
        """
        if data is None or not file_name:
            raise ValidationError(
                "Cannot upload image: image to upload was not found. "
                "Check if your key is named as 'image'",
                kind=MISSING_FILE,
                fields=("image",),
            )
        validate_segment(gallery, "path")
        validate_segment(file_name, "image")

        try:
            self.store.write_file(f"{gallery}/{file_name}", data)
        except NotFound as e:
            raise NotFound(
                f"Cannot upload image: gallery with name {gallery} was not found",
                fields=("path",),
            ) from e

        modified = self.store.stat(f"{gallery}/{file_name}").modified_at
        logger.info(f"Uploaded '{file_name}' ({len(data)} bytes) to gallery '{gallery}'")
        return self._describe(gallery, file_name, modified)

    def delete_image(self, gallery: str, file_name: str) -> None:
        """Remove one image file.

        Raises:
            NotFound: The gallery or the file does not exist.
        """
        validate_segment(gallery, "path")
        validate_segment(file_name, "img")
        try:
            self.store.delete_file(f"{gallery}/{file_name}")
        except NotFound as e:
            raise NotFound(
                f"Cannot delete image: image with name {file_name} "
                f"not exists in {gallery} gallery",
                fields=("img",),
            ) from e

        logger.info(f"Deleted image '{file_name}' from gallery '{gallery}'")
