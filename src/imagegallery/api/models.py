"""Pydantic request and response models for the Image Gallery API.

These models define the JSON schema for every API endpoint.  FastAPI uses
them for request validation, serialisation, and OpenAPI documentation.

Models
------
CreateGalleryRequest
    Payload for ``POST /gallery``.
GalleryOut / GalleryListResponse
    Gallery descriptors for ``GET /gallery`` and ``POST /gallery``.
ImageOut / GalleryContentsResponse / UploadResponse
    Image descriptors for ``GET /gallery/{path}`` and uploads.
DeleteGalleryResponse / DeleteImageResponse
    Confirmation bodies for the two ``DELETE`` routes.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CreateGalleryRequest(BaseModel):
    """Request body for ``POST /gallery``.

    ``name`` is optional at the schema level so that a missing name is
    reported through the gallery error payload rather than a generic
    request-validation error.

    Attributes:
        name: Name of the gallery to create.  Must be a single path segment.
    """

    name: str | None = Field(
        default=None,
        description="Gallery name (no '/' or '..').",
        examples=["Wild animals"],
    )


class GalleryOut(BaseModel):
    """A gallery descriptor."""

    model_config = ConfigDict(from_attributes=True)

    path: str = Field(..., description="URI-encoded path relative to the store root.")
    name: str = Field(..., description="Gallery name.")


class GalleryListResponse(BaseModel):
    galleries: list[GalleryOut]


class ImageOut(BaseModel):
    """An image descriptor.

    Attributes:
        path: File name including extension.
        fullpath: ``<gallery path>/<file name>``.
        name: Logical name (file name up to the first ``.``).
        modified: Modification timestamp of the stored file.
    """

    model_config = ConfigDict(from_attributes=True)

    path: str
    fullpath: str
    name: str
    modified: datetime


class GalleryContentsResponse(BaseModel):
    gallery: GalleryOut
    images: list[ImageOut]


class UploadResponse(BaseModel):
    uploaded: list[ImageOut]


class DeleteGalleryResponse(BaseModel):
    code: int = 200
    success: str


class DeleteImageResponse(BaseModel):
    code: int = 200
    message: str
