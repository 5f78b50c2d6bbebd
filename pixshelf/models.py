"""Domain and view models for stored images."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _format_time(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@dataclass
class Image:
    """An image stored in the system."""

    name: str
    id: int = 0
    description: str = ""
    file_path: str = ""
    mime_type: str = ""
    size_bytes: int = 0
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    def image_url(self, base_url: str) -> str:
        """URL of the image under the static images tree."""
        return base_url + "/static/images/" + self.file_path

    def public_image_url(self, base_url: str) -> str:
        """Shareable public URL of the image."""
        return base_url + "/public-images/" + self.file_path


@dataclass
class PublicImage:
    """The public-facing view of an image."""

    id: int
    name: str
    description: str
    url: str
    public_url: str
    mime_type: str
    size_bytes: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_image(cls, image: Image, base_url: str) -> PublicImage:
        return cls(
            id=image.id,
            name=image.name,
            description=image.description,
            url=image.image_url(base_url),
            public_url=image.public_image_url(base_url),
            mime_type=image.mime_type,
            size_bytes=image.size_bytes,
            created_at=image.created_at,
            updated_at=image.updated_at,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "url": self.url,
            "public_url": self.public_url,
            "mime_type": self.mime_type,
            "size_bytes": self.size_bytes,
            "created_at": _format_time(self.created_at),
            "updated_at": _format_time(self.updated_at),
        }


@dataclass
class Pagination:
    """Paging parameters together with the total number of items."""

    page: int
    page_size: int
    total: int = 0

    def to_dict(self) -> dict[str, int]:
        return {"page": self.page, "page_size": self.page_size, "total": self.total}


@dataclass
class SearchParams:
    """A search query with its paging."""

    query: str
    pagination: Pagination


@dataclass
class ImageData:
    """Image fields used when rendering pages."""

    id: int
    name: str
    description: str = ""
    url: str = ""
    public_url: str = ""
    mime_type: str = ""
    size_bytes: int = 0
    created_at: datetime | None = None

    @classmethod
    def from_public(cls, image: PublicImage) -> ImageData:
        return cls(
            id=image.id,
            name=image.name,
            description=image.description,
            url=image.url,
            public_url=image.public_url,
            mime_type=image.mime_type,
            size_bytes=image.size_bytes,
            created_at=image.created_at,
        )


@dataclass
class PageView:
    """Paging state as shown on a page."""

    current_page: int
    total_pages: int
    total_items: int
    has_prev: bool
    has_next: bool
    query: str = ""

    @classmethod
    def from_pagination(cls, pagination: Pagination, query: str = "") -> PageView:
        page, size, total = pagination.page, pagination.page_size, pagination.total
        return cls(
            current_page=page,
            total_pages=(total + size - 1) // size,
            total_items=total,
            has_prev=page > 1,
            has_next=page * size < total,
            query=query,
        )