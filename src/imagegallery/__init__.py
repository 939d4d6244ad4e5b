"""Image Gallery - REST access to a directory tree of image galleries."""

__version__ = "0.1.0"

from imagegallery.core.config import GalleryConfig, config

__all__ = [
    "GalleryConfig",
    "config",
]
