"""Business rules for storing, listing and changing images."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path

from pixshelf.models import Image, Pagination, PublicImage, SearchParams
from pixshelf.repository import ImageRepository

log = logging.getLogger(__name__)

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

_ALLOWED_PUNCTUATION = frozenset("_-.")


@dataclass(frozen=True)
class UploadedFile:
    """A file received from a client."""

    filename: str
    data: bytes
    content_type: str = ""

    @property
    def size(self) -> int:
        return len(self.data)


class FileTooLargeError(ValueError):
    """Raised when an upload is larger than the allowed size."""


def _base_name(path: str) -> str:
    if not path:
        return "."
    stripped = path.rstrip("/")
    if not stripped:
        return "/"
    return stripped.rsplit("/", 1)[-1]


def _keep(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch in _ALLOWED_PUNCTUATION)


def sanitize_filename(filename: str) -> str:
    """Reduce a client file name to a safe base name."""
    name = _base_name(filename.replace(" ", "_"))
    return "".join(ch if _keep(ch) else "_" for ch in name)


def _clamp(page: int, page_size: int) -> Pagination:
    if page < 1:
        page = 1
    if page_size < 1 or page_size > MAX_PAGE_SIZE:
        page_size = DEFAULT_PAGE_SIZE
    return Pagination(page=page, page_size=page_size)


class ImageService:
    """Coordinates image files on disk with their database records."""

    def __init__(
        self,
        repo: ImageRepository,
        base_url: str,
        upload_path: str | Path,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
    ) -> None:
        self.repo = repo
        self.base_url = base_url
        self.upload_path = Path(upload_path)
        self.max_file_size = max_file_size

    def _public(self, image: Image) -> PublicImage:
        return PublicImage.from_image(image, self.base_url)

    def get_by_id(self, id: int) -> PublicImage:
        return self._public(self.repo.get_by_id(id))

    def list(self, page: int, page_size: int) -> tuple[list[PublicImage], Pagination]:
        pagination = _clamp(page, page_size)
        pagination.total = self.repo.count()
        images = self.repo.list(pagination)
        return [self._public(img) for img in images], pagination

    def search(
        self, query: str, page: int, page_size: int
    ) -> tuple[list[PublicImage], Pagination]:
        pagination = _clamp(page, page_size)
        pagination.total = self.repo.search_count(query)
        images = self.repo.search(SearchParams(query=query, pagination=pagination))
        return [self._public(img) for img in images], pagination

    def create(self, upload: UploadedFile, name: str, description: str) -> PublicImage:
        if not isinstance(upload, UploadedFile):
            raise TypeError("invalid file type")
        log.info("Received file: %s, size: %d bytes", upload.filename, upload.size)
        if upload.size > self.max_file_size:
            raise FileTooLargeError("file too large")

        try:
            self.upload_path.mkdir(mode=0o755, parents=True, exist_ok=True)
        except OSError as exc:
            raise OSError(f"failed to create upload directory: {exc}") from exc

        filename = f"{time.time_ns()}_{sanitize_filename(upload.filename)}"
        target = self.upload_path / filename
        log.info("Saving file to: %s", target)
        try:
            target.write_bytes(upload.data)
        except OSError as exc:
            raise OSError(f"failed to create destination file: {exc}") from exc

        record = Image(
            name=name,
            description=description,
            file_path=filename,
            mime_type=upload.content_type,
            size_bytes=upload.size,
        )
        try:
            saved = self.repo.create(record)
        except Exception:
            target.unlink(missing_ok=True)
            raise
        return self._public(saved)

    def update(self, id: int, name: str, description: str) -> PublicImage:
        image = self.repo.get_by_id(id)
        image.name = name
        image.description = description
        return self._public(self.repo.update(image))

    def delete(self, id: int) -> None:
        image = self.repo.get_by_id(id)
        try:
            (self.upload_path / image.file_path).unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            raise OSError(f"failed to delete image file: {exc}") from exc
        self.repo.delete(id)