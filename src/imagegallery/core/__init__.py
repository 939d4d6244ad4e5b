"""Core gallery functionality.

Architecture Overview
---------------------
The core is layered, leaves first:

1. **Configuration** (config.py):
   - Environment-based configuration using Pydantic Settings
   - All settings prefixed with GALLERY_ in .env files

2. **Filesystem Store** (store.py):
   - Primitives over ``<root>/<gallery>/<image>``
   - Translates ``OSError`` into the error taxonomy (errors.py)
   - Refuses any path resolving outside the root

3. **Repositories** (galleries.py, images.py):
   - Gallery and image operations with name validation (naming.py)

4. **Resize Service** (resize.py):
   - Pillow-based JPEG derivatives, written beside the source image

Usage Example
-------------
    from imagegallery.core import FilesystemStore, GalleryRepository, ImageRepository

    store = FilesystemStore("gallery")
    galleries = GalleryRepository(store)
    galleries.create_gallery("Zoo")
    images = ImageRepository(store, galleries)
    images.upload_image("Zoo", "cat.png", data)
"""

from imagegallery.core.config import GalleryConfig, config
from imagegallery.core.galleries import Gallery, GalleryRepository
from imagegallery.core.images import Image, ImageRepository
from imagegallery.core.resize import ResizeService, parse_dimensions
from imagegallery.core.store import EntryStat, FilesystemStore

__all__ = [
    "EntryStat",
    "FilesystemStore",
    "Gallery",
    "GalleryConfig",
    "GalleryRepository",
    "Image",
    "ImageRepository",
    "ResizeService",
    "config",
    "parse_dimensions",
]
