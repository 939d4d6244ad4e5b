"""Configuration management for the Image Gallery server.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the GALLERY_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (GALLERY_* prefix)
2. .env file in the project root
3. Default values defined in GalleryConfig

Example .env file:
    GALLERY_STORE_ROOT=/srv/gallery
    GALLERY_JPEG_QUALITY=75
    GALLERY_MAX_DIMENSION=4096
    GALLERY_SERVER_PORT=8080
    GALLERY_LOG_LEVEL=DEBUG

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
This ensures a single source of truth for all configuration values across
the application.

Usage Example
-------------
    from imagegallery.core.config import config

    print(config.store_root)
    print(config.jpeg_quality)

Directory Management
--------------------
The store root directory is created on initialization if it does not exist.
Galleries are its direct subdirectories; nothing else lives there.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GalleryConfig(BaseSettings):
    """Main configuration for the Image Gallery server.

    Attributes
    ----------
    Storage:
        store_root : Path
            Directory whose subdirectories are the galleries
        derivative_suffix : str
            Suffix appended to an image's logical name for its resized copy

    Resizing:
        jpeg_quality : int
            JPEG quality used when encoding resized derivatives (1-100)
        max_dimension : int
            Largest width or height a resize may produce

    Server:
        server_host : str
            Bind address for uvicorn
        server_port : int
            Listening port
        log_level : str
            Root logging level applied by ``main()``

    Examples
    --------
        >>> custom = GalleryConfig(store_root="/tmp/photos", jpeg_quality=80)
        >>> custom.derivative_suffix
        '-resized'
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GALLERY_",
        case_sensitive=False,
    )

    # Storage
    store_root: Path = Field(
        default=Path("gallery"),
        description="Directory containing one subdirectory per gallery",
    )
    derivative_suffix: str = Field(
        default="-resized",
        description="Suffix of resized derivative files (before the .jpg extension)",
    )

    # Resizing
    jpeg_quality: int = Field(
        default=60,
        description="JPEG quality for resized derivatives",
        ge=1,
        le=100,
    )
    max_dimension: int = Field(
        default=10000,
        description="Largest width or height, in pixels, of a resized derivative",
        ge=1,
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address",
    )
    server_port: int = Field(
        default=3030,
        description="Server port",
        ge=1,
        le=65535,
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level for the server process",
    )

    def __init__(self, **kwargs):
        """Initialize configuration and create the store root.

        Args:
            **kwargs: Configuration overrides (typically from environment variables)
        """
        super().__init__(**kwargs)

        self.store_root.mkdir(parents=True, exist_ok=True)


# Global configuration instance
# Loads values from environment variables (GALLERY_* prefix) and .env file.
config = GalleryConfig()
