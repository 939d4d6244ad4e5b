"""Tests for imagegallery.core.config — configuration management.

Tests cover:
- Default values for all configuration fields.
- Environment variable overrides via the GALLERY_ prefix.
- Automatic creation of the store root.
- Pydantic validation constraints (quality range, size limit, port range,
  log level).
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from imagegallery.core.config import GalleryConfig


class TestConfigDefaults:
    """Verify that GalleryConfig provides sensible defaults."""

    def test_default_jpeg_quality(self, monkeypatch, temp_dir: Path):
        """Resized derivatives are encoded at quality 60 by default."""
        monkeypatch.delenv("GALLERY_JPEG_QUALITY", raising=False)
        cfg = GalleryConfig(store_root=str(temp_dir / "g"), _env_file=None)
        assert cfg.jpeg_quality == 60

    def test_default_server_port(self, monkeypatch, temp_dir: Path):
        """Default server port should be 3030."""
        monkeypatch.delenv("GALLERY_SERVER_PORT", raising=False)
        cfg = GalleryConfig(store_root=str(temp_dir / "g"), _env_file=None)
        assert cfg.server_port == 3030
        assert cfg.server_host == "0.0.0.0"

    def test_default_derivative_suffix(self, test_config: GalleryConfig):
        assert test_config.derivative_suffix == "-resized"

    def test_default_log_level(self, test_config: GalleryConfig):
        assert test_config.log_level == "INFO"

    def test_default_max_dimension(self, monkeypatch, temp_dir: Path):
        monkeypatch.delenv("GALLERY_MAX_DIMENSION", raising=False)
        cfg = GalleryConfig(store_root=str(temp_dir / "g"), _env_file=None)
        assert cfg.max_dimension == 10000

    def test_default_store_root_name(self, monkeypatch):
        """Without overrides the store root is a relative 'gallery' directory."""
        monkeypatch.delenv("GALLERY_STORE_ROOT", raising=False)
        assert GalleryConfig.model_fields["store_root"].default == Path("gallery")


class TestConfigDirectoryCreation:
    """Verify that GalleryConfig creates the store root."""

    def test_store_root_created(self, test_config: GalleryConfig):
        assert test_config.store_root.is_dir()

    def test_nested_store_root_created(self, temp_dir: Path):
        root = temp_dir / "a" / "b" / "gallery"
        GalleryConfig(store_root=str(root), _env_file=None)
        assert root.is_dir()


class TestConfigEnvironment:
    """Verify GALLERY_ environment variable overrides."""

    def test_env_overrides_quality_and_port(self, monkeypatch, temp_dir: Path):
        monkeypatch.setenv("GALLERY_JPEG_QUALITY", "85")
        monkeypatch.setenv("GALLERY_SERVER_PORT", "8080")
        monkeypatch.setenv("GALLERY_STORE_ROOT", str(temp_dir / "env-root"))
        cfg = GalleryConfig(_env_file=None)
        assert cfg.jpeg_quality == 85
        assert cfg.server_port == 8080
        assert cfg.store_root == temp_dir / "env-root"
        assert cfg.store_root.is_dir()

    def test_env_overrides_max_dimension(self, monkeypatch, temp_dir: Path):
        monkeypatch.setenv("GALLERY_MAX_DIMENSION", "2048")
        cfg = GalleryConfig(store_root=str(temp_dir / "g"), _env_file=None)
        assert cfg.max_dimension == 2048

    def test_env_is_case_insensitive(self, monkeypatch, temp_dir: Path):
        monkeypatch.setenv("gallery_log_level", "DEBUG")
        cfg = GalleryConfig(store_root=str(temp_dir / "g"), _env_file=None)
        assert cfg.log_level == "DEBUG"


class TestConfigValidation:
    """Verify field constraints."""

    @pytest.mark.parametrize("quality", [0, 101])
    def test_quality_out_of_range(self, temp_dir: Path, quality: int):
        with pytest.raises(ValidationError):
            GalleryConfig(store_root=str(temp_dir / "g"), jpeg_quality=quality, _env_file=None)

    def test_port_out_of_range(self, temp_dir: Path):
        with pytest.raises(ValidationError):
            GalleryConfig(store_root=str(temp_dir / "g"), server_port=70000, _env_file=None)

    def test_unknown_log_level(self, temp_dir: Path):
        with pytest.raises(ValidationError):
            GalleryConfig(store_root=str(temp_dir / "g"), log_level="LOUD", _env_file=None)

    def test_max_dimension_must_be_positive(self, temp_dir: Path):
        with pytest.raises(ValidationError):
            GalleryConfig(store_root=str(temp_dir / "g"), max_dimension=0, _env_file=None)
