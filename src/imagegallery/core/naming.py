"""Name and path rules shared by the repositories.

Gallery names and image file names are single path segments beneath the
store root.  Anything that could address a different location (separators,
``.``/``..``, NUL bytes, drive-qualified or absolute names) is rejected
before the filesystem is touched.
"""

from __future__ import annotations

import os
from urllib.parse import quote

from imagegallery.core.errors import INVALID_NAME, MISSING_NAME, ValidationError

# Characters JavaScript's encodeURI leaves untouched, minus "/" since a
# segment never contains one.
_URI_SAFE = ";,?:@&=+$-_.!~*'()#"

_FORBIDDEN_CHARS = ("/", "\\", "\x00")
_RESERVED_SEGMENTS = {".", ".."}


def validate_segment(value: str | None, field: str = "name") -> str:
    """Check that *value* is a usable single path segment.

    Args:
        value: Candidate gallery or file name.
        field: Request field reported in the error payload.

    Returns:
        The unchanged value.

    Raises:
        ValidationError: ``MISSING_NAME`` for empty input, ``INVALID_NAME``
            for separators, traversal segments, NUL bytes or (on Windows)
            drive prefixes.
    """
    if not value:
        raise ValidationError(
            f"Bad JSON object: '{field}' is a required property",
            kind=MISSING_NAME,
            fields=(field,),
        )

    if any(char in value for char in _FORBIDDEN_CHARS) or value in _RESERVED_SEGMENTS:
        raise ValidationError(
            f"Bad JSON object: '{field}' cannot include path separators "
            "or refer to a parent directory",
            kind=INVALID_NAME,
            fields=(field,),
        )

    # "C:foo" is drive-relative on Windows.
    if os.name == "nt" and len(value) >= 2 and value[1] == ":" and value[0].isalpha():
        raise ValidationError(
            f"Bad JSON object: '{field}' cannot be a drive-qualified path",
            kind=INVALID_NAME,
            fields=(field,),
        )

    return value


def logical_name(file_name: str) -> str:
    """Return the display name of an image file.

    The logical name is everything before the first ``.``; a name without
    any ``.`` is returned whole.  Dotfiles therefore have an empty logical
    name (``".hidden"`` → ``""``) and multi-part extensions are stripped
    entirely (``"a.tar.gz"`` → ``"a"``).
    """
    index = file_name.find(".")
    if index == -1:
        return file_name
    return file_name[:index]


def derivative_name(file_name: str, suffix: str = "-resized") -> str:
    """Return the file name of the resized derivative of *file_name*."""
    return f"{logical_name(file_name)}{suffix}.jpg"


def is_derivative(file_name: str, suffix: str = "-resized") -> bool:
    """Whether *file_name* looks like a resized derivative."""
    return file_name.endswith(f"{suffix}.jpg")


def encode_segment(segment: str) -> str:
    """Percent-encode a path segment the way ``encodeURI`` does."""
    return quote(segment, safe=_URI_SAFE)


def is_utf8_name(name: str) -> bool:
    """Whether an on-disk entry name can be reported as UTF-8 text.

    Names that are not valid UTF-8 on disk come back from :func:`os.listdir`
    with surrogate escapes and cannot be serialized into a response.
    """
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True
