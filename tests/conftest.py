"""Shared pytest fixtures for Image Gallery tests."""

import io
import os
import shutil
import sys
import tempfile
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from imagegallery.core.config import GalleryConfig
from imagegallery.core.galleries import GalleryRepository
from imagegallery.core.images import ImageRepository
from imagegallery.core.resize import ResizeService
from imagegallery.core.store import FilesystemStore


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def store_root(temp_dir: Path) -> Path:
    """Path of the gallery store root inside the temporary directory."""
    return temp_dir / "gallery"


@pytest.fixture
def test_config(store_root: Path) -> GalleryConfig:
    """Create a test configuration pointing at a temporary store root.

    Args:
        store_root: Store root from fixture

    Returns:
        GalleryConfig instance for testing
    """
    return GalleryConfig(
        store_root=str(store_root),
        jpeg_quality=60,
        _env_file=None,
    )


@pytest.fixture
def store(test_config: GalleryConfig) -> FilesystemStore:
    return FilesystemStore(test_config.store_root)


@pytest.fixture
def galleries(store: FilesystemStore) -> GalleryRepository:
    return GalleryRepository(store)


@pytest.fixture
def images(store: FilesystemStore, galleries: GalleryRepository) -> ImageRepository:
    return ImageRepository(store, galleries)


@pytest.fixture
def resizer(store: FilesystemStore, images: ImageRepository, test_config: GalleryConfig) -> ResizeService:
    return ResizeService(store, images, jpeg_quality=60, max_dimension=test_config.max_dimension)


def make_image_bytes(size: tuple[int, int] = (400, 200), fmt: str = "JPEG", mode: str = "RGB") -> bytes:
    """Encode a solid-colour image of the given size and format."""
    colour = (200, 80, 40, 255) if mode == "RGBA" else (200, 80, 40)
    image = Image.new(mode, size, colour)
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def make_image():
    """Factory fixture returning :func:`make_image_bytes`."""
    return make_image_bytes


@pytest.fixture
def jpeg_bytes() -> bytes:
    """A 400x200 JPEG."""
    return make_image_bytes((400, 200), "JPEG")


@pytest.fixture
def png_bytes() -> bytes:
    """A 300x300 RGBA PNG."""
    return make_image_bytes((300, 300), "PNG", mode="RGBA")


@pytest.fixture
def rotated_jpeg_bytes() -> bytes:
    """A 400x200 JPEG tagged with EXIF orientation 6 (displayed as 200x400)."""
    exif = Image.Exif()
    exif[0x0112] = 6
    buffer = io.BytesIO()
    Image.new("RGB", (400, 200), (200, 80, 40)).save(buffer, format="JPEG", exif=exif.tobytes())
    return buffer.getvalue()


@pytest.fixture
def undecodable_entry():
    """Factory creating a store entry whose on-disk name is not valid UTF-8.

    Returns the name as :func:`os.listdir` reports it (with surrogate escapes).
    """
    if sys.platform in ("darwin", "win32"):
        pytest.skip("filesystem only stores UTF-8 names")

    def _create(parent: Path, name: bytes = b"bad\xff", directory: bool = False) -> str:
        target = os.path.join(os.fsencode(parent), name)
        if directory:
            os.mkdir(target)
        else:
            with open(target, "wb") as f:
                f.write(b"data")
        return os.fsdecode(name)

    return _create


@pytest.fixture
def test_client(monkeypatch, test_config: GalleryConfig) -> Generator[TestClient, None, None]:
    """FastAPI TestClient bound to a temporary store root.

    The module-level configuration is swapped before the client starts so
    the application lifespan builds its store from the test configuration.
    """
    from imagegallery.api import main

    monkeypatch.setattr(main, "config", test_config)
    with TestClient(main.app) as client:
        yield client
