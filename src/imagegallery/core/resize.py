"""On-demand image resizing.

A resize request produces a JPEG *derivative* stored beside its source as
``<logical name>-resized.jpg``.  The derivative is a cache-style side effect:

- there is one derivative path per logical name, whatever the requested
  dimensions, so a later request overwrites an earlier one;
- concurrent requests for different sizes race on that single file and a
  caller may be served the result of another caller's request.

Either dimension may be ``0``, meaning "derive from the other one keeping the
source aspect ratio".  Both being ``0`` is a client error, as is any side
larger than the configured ``max_dimension``.  EXIF orientation is applied
before sizing so that width and height refer to the image as displayed.
"""

from __future__ import annotations

import io
import logging
import re

from PIL import Image, ImageOps

from imagegallery.core.errors import (
    INVALID_DIMENSIONS,
    INVALID_NAME,
    ZERO_DIMENSIONS,
    EditingError,
    NotFound,
    ValidationError,
)
from imagegallery.core.images import ImageRepository
from imagegallery.core.naming import derivative_name
from imagegallery.core.store import FilesystemStore

logger = logging.getLogger(__name__)

AUTO = 0

_DIMENSIONS_RE = re.compile(r"^(\d+)x(\d+)$")


def parse_dimensions(value: str) -> tuple[int, int]:
    """Parse a ``"<width>x<height>"`` route segment.

    Args:
        value: Segment such as ``"200x0"``.

    Returns:
        ``(width, height)``; ``0`` stands for :data:`AUTO`.

    Raises:
        ValidationError: ``INVALID_DIMENSIONS`` if the segment is not two
            non-negative integers separated by ``x``.
    """
    match = _DIMENSIONS_RE.match(value or "")
    if not match:
        raise ValidationError(
            f"Request error: '{value}' is not of the form <width>x<height>",
            kind=INVALID_DIMENSIONS,
            fields=("wxh",),
        )
    return int(match.group(1)), int(match.group(2))


def check_dimensions(width: int, height: int, limit: int | None = None) -> None:
    """Reject a request where neither dimension is given or one is too large.

    Args:
        width: Requested width or ``AUTO``.
        height: Requested height or ``AUTO``.
        limit: Largest allowed width or height; ``None`` disables the check.
    """
    if width == AUTO and height == AUTO:
        raise ValidationError(
            "Request error: w and h cannot both be 0",
            kind=ZERO_DIMENSIONS,
            fields=("wxh",),
        )
    if limit is not None and max(width, height) > limit:
        raise ValidationError(
            f"Request error: {width}x{height} exceeds the largest allowed size of {limit} pixels",
            kind=INVALID_DIMENSIONS,
            fields=("wxh",),
        )


def target_size(
    source: tuple[int, int],
    width: int,
    height: int,
    limit: int | None = None,
) -> tuple[int, int]:
    """Compute the output size, filling in an :data:`AUTO` dimension.

    Args:
        source: ``(width, height)`` of the decoded source image.
        width: Requested width or ``AUTO``.
        height: Requested height or ``AUTO``.
        limit: Largest allowed width or height of the result.

    Returns:
        Final ``(width, height)``, each at least 1 pixel.

    Raises:
        ValidationError: ``ZERO_DIMENSIONS`` when both are ``AUTO``,
            ``INVALID_DIMENSIONS`` when either side would exceed *limit*.
    """
    check_dimensions(width, height, limit)

    src_width, src_height = source
    if width == AUTO:
        width = round(src_width * height / src_height)
    elif height == AUTO:
        height = round(src_height * width / src_width)

    size = max(width, 1), max(height, 1)
    # The derived side of a very narrow source can still overshoot.
    check_dimensions(*size, limit)
    return size


class ResizeService:
    """Produce resized JPEG derivatives of gallery images."""

    def __init__(
        self,
        store: FilesystemStore,
        images: ImageRepository,
        jpeg_quality: int = 60,
        derivative_suffix: str = "-resized",
        max_dimension: int = 10000,
    ):
        self.store = store
        self.images = images
        self.jpeg_quality = jpeg_quality
        self.derivative_suffix = derivative_suffix
        self.max_dimension = max_dimension

    def resize(self, gallery: str, file_name: str, width: int, height: int) -> str:
        """Resize an image and persist the derivative.

        Args:
            gallery: Gallery name.
            file_name: Source image file name.
            width: Target width, or ``0`` for automatic.
            height: Target height, or ``0`` for automatic.

        Returns:
            Root-relative path of the derivative, ``<gallery>/<derivative>``.

        Raises:
            NotFound: The gallery does not exist, or the image is not among
                its current entries.
            ValidationError: Both dimensions are zero, a dimension exceeds
                ``max_dimension``, or the source would be its own derivative.
            EditingError: The source cannot be decoded or re-encoded.
        """
        if not self.images.contains(gallery, file_name):
            raise NotFound(
                f"Image was not found: image with name {file_name} "
                f"was not found in {gallery} gallery",
                fields=("img",),
            )
        check_dimensions(width, height, self.max_dimension)

        derivative = derivative_name(file_name, self.derivative_suffix)
        if derivative == file_name:
            raise ValidationError(
                f"Image was not edited: resizing {file_name} would overwrite the image itself",
                kind=INVALID_NAME,
                fields=("img",),
            )

        source = self.store.read_file(f"{gallery}/{file_name}")
        encoded = self._render(source, file_name, width, height)

        output = f"{gallery}/{derivative}"
        self.store.write_file(output, encoded)
        logger.info(f"Resized '{gallery}/{file_name}' into '{output}'")
        return output

    def _render(self, data: bytes, file_name: str, width: int, height: int) -> bytes:
        """Decode, apply EXIF orientation, resample and JPEG-encode *data*."""
        try:
            with Image.open(io.BytesIO(data)) as source:
                source.load()
                image = ImageOps.exif_transpose(source)
                size = target_size(image.size, width, height, self.max_dimension)
                resized = image.resize(size, Image.Resampling.LANCZOS)

            if resized.mode != "RGB":
                resized = resized.convert("RGB")

            buffer = io.BytesIO()
            resized.save(buffer, format="JPEG", quality=self.jpeg_quality)
            return buffer.getvalue()
        except (OSError, ValueError, OverflowError, MemoryError, Image.DecompressionBombError) as e:
            logger.warning(f"Could not resize {file_name}: {e}")
            raise EditingError(
                f"Image was not edited: image {file_name} cannot be resized",
                fields=("path",),
            ) from e
