"""Error taxonomy for gallery and image operations.

Every failure that can reach a client is one of the classes below.  The
filesystem store and the resize service translate ``OSError`` and Pillow
failures into these types, so route handlers never see a raw low-level
exception.

Each error carries:

- ``status_code`` — HTTP status the API layer responds with.
- ``kind`` — machine-readable identifier such as ``"NOT_EXISTS"``.
- ``fields`` — request fields the error refers to (``name``, ``path``,
  ``img``, ...).  The first one is used as the key of ``kind`` in the
  rendered payload.
- ``description`` — human-readable message.

Classes
-------
========================  ======  ==========================================
Class                     Status  Kinds
========================  ======  ==========================================
``ValidationError``       400     MISSING_NAME, INVALID_NAME, MISSING_FILE,
                                  ZERO_DIMENSIONS, INVALID_DIMENSIONS,
                                  INVALID_REQUEST
``Conflict``              409     ALREADY_EXISTS, NOT_EMPTY
``NotFound``              404     NOT_EXISTS
``EditingError``          500     EDITING_ERROR
``InternalError``         500     INTERNAL_ERROR
========================  ======  ==========================================
"""

from __future__ import annotations

MISSING_NAME = "MISSING_NAME"
INVALID_NAME = "INVALID_NAME"
MISSING_FILE = "MISSING_FILE"
ZERO_DIMENSIONS = "ZERO_DIMENSIONS"
INVALID_DIMENSIONS = "INVALID_DIMENSIONS"
INVALID_REQUEST = "INVALID_REQUEST"
ALREADY_EXISTS = "ALREADY_EXISTS"
NOT_EMPTY = "NOT_EMPTY"
NOT_EXISTS = "NOT_EXISTS"
EDITING_ERROR = "EDITING_ERROR"
INTERNAL_ERROR = "INTERNAL_ERROR"


class GalleryError(Exception):
    """Base class for all errors surfaced to API clients."""

    status_code: int = 500
    default_kind: str = INTERNAL_ERROR

    def __init__(
        self,
        description: str,
        *,
        kind: str | None = None,
        fields: tuple[str, ...] | list[str] = ("path",),
    ) -> None:
        super().__init__(description)
        self.description = description
        self.kind = kind or self.default_kind
        self.fields = tuple(fields)

    def to_payload(self) -> dict:
        """Render the error as the uniform JSON error body.

        Returns:
            Dictionary with ``code``, ``payload``, ``<field>`` and
            ``description`` keys.
        """
        return {
            "code": self.status_code,
            "payload": {
                "paths": list(self.fields),
                "validator": "required",
                "example": None,
            },
            self.fields[0]: self.kind,
            "description": self.description,
        }


class ValidationError(GalleryError):
    """Malformed or missing client input."""

    status_code = 400
    default_kind = INVALID_REQUEST


class Conflict(GalleryError):
    """Name collision or deletion of a non-empty gallery."""

    status_code = 409
    default_kind = ALREADY_EXISTS


class NotFound(GalleryError):
    """Gallery or image does not exist."""

    status_code = 404
    default_kind = NOT_EXISTS


class EditingError(GalleryError):
    """An image could not be decoded, resized or encoded."""

    status_code = 500
    default_kind = EDITING_ERROR


class InternalError(GalleryError):
    """Unexpected filesystem fault."""

    status_code = 500
    default_kind = INTERNAL_ERROR
