"""Local filesystem storage for product images."""

import os
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from loguru import logger

from src.storefront.core.errors import (
    ImageStorageError,
    ImageTooLarge,
    UnsupportedImageType,
)
from src.storefront.runtime.config.config_data import UploadsConfig

CHUNK_SIZE = 64 * 1024
DEFAULT_MAX_BYTES = 10 * 1024 * 1024
DEFAULT_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp"})


@dataclass
class ImageUpload:
    """An uploaded file as received from the client."""

    filename: str
    stream: BinaryIO
    size: int | None = None


@dataclass(frozen=True)
class StoredImage:
    """Where a saved image lives: ``path`` for deletion, ``url`` for display."""

    path: str
    url: str


class ImageStorageService:
    """Validate, persist, delete and replace uploaded images.

    Files are written below ``root/subdirectory`` and named
    ``<uuid4>_<unix-timestamp><ext>``. Validation is extension based; the
    content is not sniffed.
    """

    def __init__(
        self,
        root: str | Path = "uploads",
        subdirectory: str = "products",
        public_base_url: str = "http://localhost:8081",
        url_prefix: str = "uploads",
        max_bytes: int = DEFAULT_MAX_BYTES,
        allowed_extensions: frozenset[str] | set[str] | list[str] = DEFAULT_EXTENSIONS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.root = Path(root)
        self.directory = self.root / subdirectory
        self._subdirectory = subdirectory.strip("/")
        self._public_base_url = public_base_url.rstrip("/")
        self._url_prefix = url_prefix.strip("/")
        self._max_bytes = max_bytes
        self._allowed_extensions = frozenset(ext.lower() for ext in allowed_extensions)
        self._clock = clock

    @classmethod
    def from_config(cls, config: UploadsConfig) -> "ImageStorageService":
        return cls(
            root=config.root,
            subdirectory=config.subdirectory,
            public_base_url=config.public_base_url,
            url_prefix=config.url_prefix,
            max_bytes=config.max_size_bytes,
            allowed_extensions=config.allowed_extensions,
        )

    @property
    def max_bytes(self) -> int:
        return self._max_bytes

    def ensure_directory(self) -> None:
        """Create the upload directory if it does not exist yet."""
        self.directory.mkdir(parents=True, exist_ok=True)
        logger.info("Upload directory ready at {}", self.directory)

    def validate(self, upload: ImageUpload) -> None:
        """Check size and extension.

        Raises:
            ImageTooLarge: The declared size exceeds the limit
            UnsupportedImageType: The extension is not an allowed image type
        """
        size = upload.size if upload.size is not None else _measure(upload.stream)
        if size is not None and size > self._max_bytes:
            raise ImageTooLarge(
                f"File size exceeds maximum limit of {self._max_bytes // (1024 * 1024)}MB"
            )

        ext = Path(upload.filename or "").suffix.lower()
        if ext not in self._allowed_extensions:
            allowed = ", ".join(sorted(e.lstrip(".").upper() for e in self._allowed_extensions))
            raise UnsupportedImageType(f"Invalid file type. Only {allowed} are allowed")

    def public_url(self, filename: str) -> str:
        return f"{self._public_base_url}/{self._url_prefix}/{self._subdirectory}/{filename}"

    def save(self, upload: ImageUpload) -> StoredImage:
        """Validate and write ``upload`` to disk.

        The byte count is enforced again while copying, so a client that
        under-reports the size still cannot exceed the limit. A partially
        written file is removed before the error propagates.
        """
        self.validate(upload)

        ext = Path(upload.filename).suffix.lower()
        filename = f"{uuid.uuid4()}_{int(self._clock())}{ext}"
        path = self.directory / filename

        written = 0
        try:
            with open(path, "xb") as dst:
                while chunk := upload.stream.read(CHUNK_SIZE):
                    written += len(chunk)
                    if written > self._max_bytes:
                        raise ImageTooLarge(
                            "File size exceeds maximum limit of "
                            f"{self._max_bytes // (1024 * 1024)}MB"
                        )
                    dst.write(chunk)
        except ImageTooLarge:
            _remove_partial(path)
            raise
        except OSError as exc:
            _remove_partial(path)
            raise ImageStorageError(f"Failed to save file: {exc}") from exc

        logger.info("Stored image {} ({} bytes)", path, written)
        return StoredImage(path=str(path), url=self.public_url(filename))

    def delete(self, path: str | None) -> None:
        """Remove a stored image. Empty paths and missing files are a no-op."""
        if not path:
            return
        try:
            Path(path).unlink()
        except FileNotFoundError:
            return
        except OSError as exc:
            raise ImageStorageError(f"Failed to delete file: {exc}") from exc
        logger.info("Deleted image {}", path)

    def discard(self, path: str | None) -> bool:
        """Best-effort delete. Failures are logged as warnings and reported as False."""
        try:
            self.delete(path)
        except ImageStorageError as exc:
            logger.warning("Could not remove image {}: {}", path, exc.message)
            return False
        return True

    def replace(
        self,
        upload: ImageUpload,
        old_path: str | None,
        on_saved: Callable[[StoredImage], None] | None = None,
    ) -> StoredImage:
        """Save ``upload`` and then drop the image at ``old_path``.

        ``on_saved`` runs after the new file is written and before the old one
        is touched; it is where callers persist the new reference. If it raises,
        the new file is deleted and the old one is left in place. Failure to
        remove the old file does not fail the operation.
        """
        stored = self.save(upload)

        if on_saved is not None:
            try:
                on_saved(stored)
            except Exception:
                self.discard(stored.path)
                raise

        if old_path and old_path != stored.path:
            self.discard(old_path)
        return stored


def _measure(stream: BinaryIO) -> int | None:
    if not stream.seekable():
        return None
    position = stream.tell()
    size = stream.seek(0, os.SEEK_END)
    stream.seek(position)
    return size - position


def _remove_partial(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.error("Could not remove partial upload {}: {}", path, exc)
