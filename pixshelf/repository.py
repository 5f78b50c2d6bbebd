"""Storage of image records on top of the SQL queries."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone

from pixshelf.models import Image, Pagination, SearchParams
from pixshelf.queries import ImageRow, Queries

_QUERY_ERRORS = (LookupError, sqlite3.Error)


class RepositoryError(Exception):
    """Raised when a database operation on images fails."""


def _to_image(row: ImageRow) -> Image:
    now = datetime.now(timezone.utc)
    return Image(
        id=row.id,
        name=row.name,
        description=row.description or "",
        file_path=row.file_path,
        mime_type=row.mime_type,
        size_bytes=row.size_bytes,
        created_at=row.created_at if row.created_at is not None else now,
        updated_at=row.updated_at if row.updated_at is not None else now,
    )


def _offset(pagination: Pagination) -> int:
    return (pagination.page - 1) * pagination.page_size


def _pattern(query: str) -> str:
    return f"%{query}%"


class ImageRepository:
    """Reads and writes image records."""

    def __init__(self, queries: Queries) -> None:
        self._queries = queries

    def get_by_id(self, id: int) -> Image:
        try:
            row = self._queries.get_image(id)
        except _QUERY_ERRORS as exc:
            raise RepositoryError(f"failed to get image: {exc}") from exc
        return _to_image(row)

    def list(self, pagination: Pagination) -> list[Image]:
        try:
            rows = self._queries.list_images(pagination.page_size, _offset(pagination))
        except _QUERY_ERRORS as exc:
            raise RepositoryError(f"failed to list images: {exc}") from exc
        return [_to_image(row) for row in rows]

    def count(self) -> int:
        try:
            return int(self._queries.count_images())
        except _QUERY_ERRORS as exc:
            raise RepositoryError(f"failed to count images: {exc}") from exc

    def search(self, params: SearchParams) -> list[Image]:
        paging = params.pagination
        try:
            rows = self._queries.search_images(
                _pattern(params.query), paging.page_size, _offset(paging)
            )
        except _QUERY_ERRORS as exc:
            raise RepositoryError(f"failed to search images: {exc}") from exc
        return [_to_image(row) for row in rows]

    def search_count(self, query: str) -> int:
        try:
            return int(self._queries.count_search_images(_pattern(query)))
        except _QUERY_ERRORS as exc:
            raise RepositoryError(f"failed to count search results: {exc}") from exc

    def create(self, image: Image) -> Image:
        try:
            row = self._queries.create_image(
                image.name,
                image.description or None,
                image.file_path,
                image.mime_type,
                image.size_bytes,
            )
        except _QUERY_ERRORS as exc:
            raise RepositoryError(f"failed to create image: {exc}") from exc
        return _to_image(row)

    def update(self, image: Image) -> Image:
        try:
            row = self._queries.update_image(
                image.id, image.name, image.description or None
            )
        except _QUERY_ERRORS as exc:
            raise RepositoryError(f"failed to update image: {exc}") from exc
        return _to_image(row)

    def delete(self, id: int) -> None:
        try:
            self._queries.delete_image(id)
        except _QUERY_ERRORS as exc:
            raise RepositoryError(f"failed to delete image: {exc}") from exc