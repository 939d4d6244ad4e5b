"""Filesystem-backed storage for galleries and images.

The store owns a single root directory laid out as::

    <root>/
        <gallery>/
            <image>
            <logical name>-resized.jpg

All paths given to :class:`FilesystemStore` are relative to the root.  They
are resolved and checked against the root before any system call, so a path
that would escape it is refused even if a caller forgot to validate the
individual segments.

``OSError`` subclasses are translated into the taxonomy of
:mod:`imagegallery.core.errors` here, at the lowest layer, so repositories
only deal with ``NotFound``/``Conflict``/``InternalError``.
"""

from __future__ import annotations

import errno
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from imagegallery.core.errors import (
    ALREADY_EXISTS,
    INVALID_NAME,
    NOT_EMPTY,
    Conflict,
    InternalError,
    NotFound,
    ValidationError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntryStat:
    """Subset of ``os.stat_result`` the repositories care about."""

    is_directory: bool
    modified_at: datetime


class FilesystemStore:
    """Directory listing, stat, create, delete, read and write under a root."""

    def __init__(self, root: Path | str):
        self.root = Path(root).resolve()
        self.root.mkdir(parents=True, exist_ok=True)
        logger.info(f"Filesystem store rooted at {self.root}")

    def resolve(self, relative: str | Path) -> Path:
        """Map a root-relative path to an absolute one inside the root.

        Raises:
            ValidationError: If the path is absolute or resolves outside the
                root.
        """
        relative = Path(relative)
        if relative.is_absolute():
            raise ValidationError(
                f"Absolute paths are not allowed: {relative}",
                kind=INVALID_NAME,
            )

        target = (self.root / relative).resolve()
        if target != self.root and self.root not in target.parents:
            raise ValidationError(
                f"Path escapes the gallery root: {relative}",
                kind=INVALID_NAME,
            )
        return target

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    def list_entries(self, relative: str | Path = ".") -> list[str]:
        """Return the names of the entries in a directory.

        Order is whatever the operating system enumerates.
        """
        target = self.resolve(relative)
        try:
            return os.listdir(target)
        except (FileNotFoundError, NotADirectoryError) as e:
            raise NotFound(f"Cannot read directory: {relative} does not exist") from e
        except OSError as e:
            raise self._internal("list", relative, e) from e

    def stat(self, relative: str | Path) -> EntryStat:
        target = self.resolve(relative)
        try:
            result = target.stat()
        except (FileNotFoundError, NotADirectoryError) as e:
            raise NotFound(f"Cannot stat: {relative} does not exist") from e
        except OSError as e:
            raise self._internal("stat", relative, e) from e

        return EntryStat(
            is_directory=target.is_dir(),
            modified_at=datetime.fromtimestamp(result.st_mtime, tz=timezone.utc),
        )

    def is_directory(self, relative: str | Path) -> bool:
        try:
            return self.stat(relative).is_directory
        except NotFound:
            return False

    def read_file(self, relative: str | Path) -> bytes:
        target = self.resolve(relative)
        try:
            with open(target, "rb") as handle:
                return handle.read()
        except (FileNotFoundError, NotADirectoryError, IsADirectoryError) as e:
            raise NotFound(f"Cannot read file: {relative} does not exist") from e
        except OSError as e:
            raise self._internal("read", relative, e) from e

    # ------------------------------------------------------------------
    # Write operations
    # ------------------------------------------------------------------

    def create_directory(self, relative: str | Path) -> Path:
        """Create a directory.

        ``mkdir`` without ``exist_ok`` is atomic: of two concurrent callers
        with the same name exactly one succeeds.

        Raises:
            Conflict: ``ALREADY_EXISTS`` if anything exists at the path.
        """
        target = self.resolve(relative)
        try:
            target.mkdir()
        except FileExistsError as e:
            raise Conflict(
                f"Cannot create directory: {relative} already exists",
                kind=ALREADY_EXISTS,
            ) from e
        except FileNotFoundError as e:
            raise NotFound(f"Cannot create directory: parent of {relative} does not exist") from e
        except OSError as e:
            raise self._internal("mkdir", relative, e) from e

        logger.info(f"Created directory {target}")
        return target

    def delete_directory(self, relative: str | Path) -> None:
        """Remove an empty directory.

        Raises:
            NotFound: The directory does not exist.
            Conflict: ``NOT_EMPTY`` if it still has entries.
        """
        target = self.resolve(relative)
        if target == self.root:
            raise ValidationError("Refusing to delete the gallery root", kind=INVALID_NAME)

        try:
            target.rmdir()
        except (FileNotFoundError, NotADirectoryError) as e:
            raise NotFound(f"Cannot delete directory: {relative} does not exist") from e
        except OSError as e:
            if e.errno in (errno.ENOTEMPTY, errno.EEXIST):
                raise Conflict(
                    f"Cannot delete directory: {relative} is not empty",
                    kind=NOT_EMPTY,
                ) from e
            raise self._internal("rmdir", relative, e) from e

        logger.info(f"Deleted directory {target}")

    def delete_file(self, relative: str | Path) -> None:
        target = self.resolve(relative)
        if target.is_dir():
            raise NotFound(f"Cannot delete file: {relative} is not a file")

        try:
            target.unlink()
        except (FileNotFoundError, NotADirectoryError) as e:
            raise NotFound(f"Cannot delete file: {relative} does not exist") from e
        except OSError as e:
            raise self._internal("unlink", relative, e) from e

        logger.info(f"Deleted file {target}")

    def write_file(self, relative: str | Path, data: bytes) -> Path:
        """Write *data* to a file, replacing any previous content.

        Raises:
            NotFound: The parent directory does not exist.
        """
        target = self.resolve(relative)
        try:
            with open(target, "wb") as handle:
                handle.write(data)
        except (FileNotFoundError, NotADirectoryError) as e:
            raise NotFound(f"Cannot write file: parent of {relative} does not exist") from e
        except IsADirectoryError as e:
            raise Conflict(
                f"Cannot write file: {relative} is a directory",
                kind=ALREADY_EXISTS,
            ) from e
        except OSError as e:
            raise self._internal("write", relative, e) from e

        logger.debug(f"Wrote {len(data)} bytes to {target}")
        return target

    def _internal(self, operation: str, relative: str | Path, error: OSError) -> InternalError:
        logger.error(f"Filesystem {operation} failed for {relative}: {error}", exc_info=True)
        return InternalError(f"Filesystem error during {operation} of {relative}")
