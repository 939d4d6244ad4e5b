"""Image Gallery — FastAPI Application.

This module is the single entry point for the web application.  It defines
the FastAPI ``app`` instance, all REST API routes, the exception handlers
that shape error payloads, and the ``main()`` CLI function that launches the
uvicorn server.

Architecture
------------
The application is a thin HTTP layer over three core objects built at
startup and kept on ``app.state``:

- :class:`~imagegallery.core.galleries.GalleryRepository` — galleries are
  directories under the store root.
- :class:`~imagegallery.core.images.ImageRepository` — images are files in
  a gallery directory.
- :class:`~imagegallery.core.resize.ResizeService` — JPEG derivatives made
  on request.

Filesystem and codec work is blocking, so every call into the core runs in
the threadpool.  Requests are otherwise independent; there is no locking.

Endpoints
---------
========  ================================  ==================================
Method    Path                              Purpose
========  ================================  ==================================
GET       ``/gallery``                      List galleries
POST      ``/gallery``                      Create a gallery
GET       ``/gallery/{path}``               List images in a gallery
POST      ``/gallery/{path}``               Upload an image (field ``image``)
DELETE    ``/gallery/{path}``               Delete an empty gallery
DELETE    ``/gallery/{path}/{img}``         Delete an image
GET       ``/{w}x{h}/gallery/{path}/{img}`` Resize and fetch an image
========  ================================  ==================================

Usage
-----
CLI (installed entry point)::

    imagegallery

Direct invocation::

    python -m imagegallery.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from imagegallery import __version__
from imagegallery.api.models import (
    CreateGalleryRequest,
    DeleteGalleryResponse,
    DeleteImageResponse,
    GalleryContentsResponse,
    GalleryListResponse,
    GalleryOut,
    ImageOut,
    UploadResponse,
)
from imagegallery.core.config import config
from imagegallery.core.errors import (
    INTERNAL_ERROR,
    INVALID_REQUEST,
    GalleryError,
    InternalError,
    ValidationError,
)
from imagegallery.core.galleries import GalleryRepository
from imagegallery.core.images import ImageRepository
from imagegallery.core.resize import ResizeService, parse_dimensions
from imagegallery.core.store import FilesystemStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Application lifecycle — store and repository setup.
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the store, repositories and resize service on startup.

    Everything is derived from :data:`~imagegallery.core.config.config` at
    the time the application starts, so tests can swap the configuration
    before entering the client context.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to the application for the duration of its lifetime.
    """
    store = FilesystemStore(config.store_root)
    galleries = GalleryRepository(store, derivative_suffix=config.derivative_suffix)
    images = ImageRepository(store, galleries, derivative_suffix=config.derivative_suffix)

    app.state.store = store
    app.state.galleries = galleries
    app.state.images = images
    app.state.resizer = ResizeService(
        store,
        images,
        jpeg_quality=config.jpeg_quality,
        derivative_suffix=config.derivative_suffix,
        max_dimension=config.max_dimension,
    )
    logger.info(f"Gallery store ready at {store.root}")

    yield


# ---------------------------------------------------------------------------
# FastAPI application instance.
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Image Gallery",
    description="REST access to a directory tree of image galleries with on-demand resizing.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["HEAD", "GET", "POST", "PUT", "OPTIONS", "DELETE"],
    allow_headers=[
        "Accept",
        "Accept-Language",
        "Content-Language",
        "Content-Type",
        "Authorization",
    ],
)


# ---------------------------------------------------------------------------
# Error handlers.
# ---------------------------------------------------------------------------


@app.exception_handler(GalleryError)
async def handle_gallery_error(request: Request, exc: GalleryError) -> JSONResponse:
    """Render any :class:`GalleryError` as the uniform error payload."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.description}")
    else:
        logger.warning(f"{request.method} {request.url.path}: {exc.kind}: {exc.description}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies with the same payload shape as other errors."""
    fields = [str(err["loc"][-1]) for err in exc.errors() if err.get("loc")] or ["body"]
    error = ValidationError(
        f"Bad request: {exc.errors()[0]['msg'] if exc.errors() else 'invalid body'}",
        kind=INVALID_REQUEST,
        fields=fields,
    )
    logger.warning(f"{request.method} {request.url.path}: {error.description}")
    return JSONResponse(status_code=error.status_code, content=error.to_payload())


@app.exception_handler(Exception)
async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: never leak a raw exception to the client."""
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    error = InternalError("Internal server error", kind=INTERNAL_ERROR)
    return JSONResponse(status_code=error.status_code, content=error.to_payload())


# ---------------------------------------------------------------------------
# Gallery routes.
# ---------------------------------------------------------------------------


@app.get("/gallery", response_model=GalleryListResponse)
async def list_galleries() -> GalleryListResponse:
    """Return the name and path of every gallery.

    Returns:
        ``{"galleries": [{"path", "name"}, ...]}`` in filesystem order.
    """
    galleries = await run_in_threadpool(app.state.galleries.list_galleries)
    return GalleryListResponse(galleries=[GalleryOut.model_validate(g) for g in galleries])


@app.post("/gallery", status_code=201, response_model=GalleryOut)
async def create_gallery(req: CreateGalleryRequest | None = None) -> GalleryOut:
    """Create an empty gallery.

    Args:
        req: JSON body ``{"name": "..."}``.

    Returns:
        The new gallery's ``path`` and ``name``.

    Raises:
        ValidationError: 400 for a missing or invalid name.
        Conflict: 409 if the gallery already exists.
    """
    name = req.name if req else None
    gallery = await run_in_threadpool(app.state.galleries.create_gallery, name)
    return GalleryOut.model_validate(gallery)


@app.get("/gallery/{path}", response_model=GalleryContentsResponse)
async def get_gallery(path: str) -> GalleryContentsResponse:
    """Return a gallery and its images.

    Raises:
        NotFound: 404 if the gallery does not exist.
    """
    gallery = await run_in_threadpool(app.state.galleries.get_gallery, path)
    images = await run_in_threadpool(app.state.images.list_images, path)
    return GalleryContentsResponse(
        gallery=GalleryOut.model_validate(gallery),
        images=[ImageOut.model_validate(img) for img in images],
    )


@app.delete("/gallery/{path}", response_model=DeleteGalleryResponse)
async def delete_gallery(path: str) -> DeleteGalleryResponse:
    """Delete an empty gallery.

    Raises:
        NotFound: 404 if the gallery does not exist.
        Conflict: 409 if the gallery still contains files.
    """
    await run_in_threadpool(app.state.galleries.delete_gallery, path)
    return DeleteGalleryResponse(success=f"Gallery {path} was successfully deleted")


# ---------------------------------------------------------------------------
# Image routes.
# ---------------------------------------------------------------------------


@app.post("/gallery/{path}", status_code=201, response_model=UploadResponse)
async def upload_image(path: str, image: UploadFile | None = File(default=None)) -> UploadResponse:
    """Upload one image into a gallery, replacing a same-named file.

    Args:
        path: Gallery name.
        image: Multipart file field named ``image``.

    Raises:
        ValidationError: 400 if no ``image`` field was sent.
        NotFound: 404 if the gallery does not exist.
    """
    if image is None:
        data, file_name = None, None
    else:
        data = await image.read()
        file_name = image.filename
        await image.close()

    stored = await run_in_threadpool(app.state.images.upload_image, path, file_name, data)
    return UploadResponse(uploaded=[ImageOut.model_validate(stored)])


@app.delete("/gallery/{path}/{img}", response_model=DeleteImageResponse)
async def delete_image(path: str, img: str) -> DeleteImageResponse:
    """Delete one image from a gallery.

    Raises:
        NotFound: 404 if the image does not exist.
    """
    await run_in_threadpool(app.state.images.delete_image, path, img)
    return DeleteImageResponse(message=f"Image {img} was successfully deleted")


@app.get("/{dimensions}/gallery/{path}/{img}", response_class=FileResponse)
async def resize_image(dimensions: str, path: str, img: str) -> FileResponse:
    """Resize an image and return the JPEG derivative.

    ``dimensions`` is ``<width>x<height>``; ``0`` on one side keeps the
    aspect ratio.  The derivative is written next to the source and then
    served from disk, so concurrent requests for other sizes of the same
    image may replace it before it is sent.

    Raises:
        ValidationError: 400 for malformed or all-zero dimensions.
        NotFound: 404 if the gallery or image does not exist.
        EditingError: 500 if the image cannot be decoded.
    """
    width, height = parse_dimensions(dimensions)
    output = await run_in_threadpool(app.state.resizer.resize, path, img, width, height)
    return FileResponse(app.state.store.resolve(output), media_type="image/jpeg")


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host, port and log level from
    :data:`~imagegallery.core.config.config` (``GALLERY_SERVER_HOST``,
    ``GALLERY_SERVER_PORT``, ``GALLERY_LOG_LEVEL``).  Defaults to
    ``0.0.0.0:3030``.

    This function is registered as the ``imagegallery`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "imagegallery.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
