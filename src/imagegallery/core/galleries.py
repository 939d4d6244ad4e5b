"""Gallery repository: galleries are directories directly under the store root.

A gallery moves through two states only::

    NonExistent --create--> Existing --delete (when empty)--> NonExistent

Uniqueness of names comes from the filesystem: creating a directory that
already exists fails, and concurrent creators are serialized by ``mkdir``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from imagegallery.core.errors import Conflict, NotFound
from imagegallery.core.naming import (
    encode_segment,
    is_derivative,
    is_utf8_name,
    validate_segment,
)
from imagegallery.core.store import FilesystemStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Gallery:
    """A named collection of images.

    Attributes:
        name: Directory name, also the gallery identifier.
        path: ``name`` URI-encoded, relative to the store root.
    """

    name: str
    path: str

    @classmethod
    def from_name(cls, name: str) -> Gallery:
        return cls(name=name, path=encode_segment(name))


class GalleryRepository:
    """List, create, inspect and delete galleries."""

    def __init__(self, store: FilesystemStore, derivative_suffix: str = "-resized"):
        self.store = store
        self.derivative_suffix = derivative_suffix

    def list_galleries(self) -> list[Gallery]:
        """Return every gallery in filesystem enumeration order.

        Plain files sitting in the store root are skipped, as are directories
        whose names are not valid UTF-8.  The order is whatever the operating
        system returns and is not stable.
        """
        galleries = []
        for entry in self.store.list_entries():
            if not is_utf8_name(entry):
                logger.warning(f"Skipping non-UTF-8 gallery name: {entry!r}")
                continue
            try:
                if self.store.stat(entry).is_directory:
                    galleries.append(Gallery.from_name(entry))
            except NotFound:
                # Removed between listing and stat.
                continue
        return galleries

    def create_gallery(self, name: str | None) -> Gallery:
        """Create an empty gallery.

        Raises:
            ValidationError: Name is missing or not a single safe segment.
            Conflict: A gallery (or file) with this name already exists.
        """
        name = validate_segment(name, "name")
        try:
            self.store.create_directory(name)
        except Conflict as e:
            raise Conflict(
                f"Cannot create directory: directory with name {name} already exists",
                kind=e.kind,
                fields=("name",),
            ) from e

        logger.info(f"Created gallery '{name}'")
        return Gallery.from_name(name)

    def get_gallery(self, name: str) -> Gallery:
        """Return the descriptor of an existing gallery.

        Raises:
            NotFound: No directory with this name exists.
        """
        name = validate_segment(name, "path")
        if not self.store.is_directory(name):
            raise NotFound(
                f"Cannot read directory: directory with name {name} not exists",
                fields=("path",),
            )
        return Gallery.from_name(name)

    def delete_gallery(self, name: str) -> None:
        """Delete an empty gallery.

        Raises:
            NotFound: The gallery does not exist.
            Conflict: ``NOT_EMPTY`` when the gallery still holds files,
                resized derivatives included.
        """
        self.get_gallery(name)
        try:
            self.store.delete_directory(name)
        except NotFound as e:
            raise NotFound(
                f"Cannot delete directory: directory with name {name} not exists",
                fields=("path",),
            ) from e
        except Conflict as e:
            description = f"Cannot delete directory: gallery {name} is not empty"
            hidden = self._hidden_derivatives(name)
            if hidden:
                description += (
                    " (it still holds resized copies not shown in image listings: "
                    f"{', '.join(hidden)})"
                )
            raise Conflict(description, kind=e.kind, fields=("path",)) from e

        logger.info(f"Deleted gallery '{name}'")

    def _hidden_derivatives(self, name: str) -> list[str]:
        try:
            entries = self.store.list_entries(name)
        except NotFound:
            return []
        return sorted(
            e for e in entries if is_derivative(e, self.derivative_suffix) and is_utf8_name(e)
        )
