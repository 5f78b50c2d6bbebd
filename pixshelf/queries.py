"""SQL access to the images table."""

from __future__ import annotations

import sqlite3
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from urllib.parse import urlsplit

_COLUMNS = "id, name, description, file_path, mime_type, size_bytes, created_at, updated_at"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS images (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    description TEXT,
    file_path TEXT NOT NULL,
    mime_type TEXT NOT NULL,
    size_bytes INTEGER NOT NULL,
    created_at TEXT,
    updated_at TEXT
)
"""

_INDEX = "CREATE INDEX IF NOT EXISTS idx_images_created_at ON images (created_at)"


class RowNotFound(LookupError):
    """Raised when a query that must return one row finds none."""


@dataclass
class ImageRow:
    """One row of the images table."""

    id: int
    name: str
    description: str | None
    file_path: str
    mime_type: str
    size_bytes: int
    created_at: datetime | None
    updated_at: datetime | None


def _stamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f+00:00")


def _parse_stamp(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _row(values: tuple) -> ImageRow:
    id_, name, description, file_path, mime_type, size_bytes, created, updated = values
    return ImageRow(
        id=id_,
        name=name,
        description=description,
        file_path=file_path,
        mime_type=mime_type,
        size_bytes=size_bytes,
        created_at=_parse_stamp(created),
        updated_at=_parse_stamp(updated),
    )


def _database_path(database_url: str) -> str:
    if "://" not in database_url:
        return database_url or ":memory:"
    parts = urlsplit(database_url)
    if parts.scheme != "sqlite":
        raise ValueError(f"unsupported database scheme {parts.scheme!r}")
    path = parts.path
    if not path or path == "/":
        return ":memory:"
    # sqlite:///relative.db and sqlite:////absolute.db
    return path[1:]


def connect(database_url: str) -> sqlite3.Connection:
    """Open the database named by a URL or path and check that it answers."""
    try:
        conn = sqlite3.connect(_database_path(database_url), check_same_thread=False)
    except (ValueError, sqlite3.Error) as exc:
        raise ConnectionError(f"unable to connect to database: {exc}") from exc
    try:
        conn.execute("SELECT 1").fetchone()
    except sqlite3.Error as exc:
        conn.close()
        raise ConnectionError(f"unable to ping database: {exc}") from exc
    return conn


def ensure_schema(db: sqlite3.Connection) -> None:
    """Create the images table if it does not exist."""
    with db:
        db.execute(_SCHEMA)
        db.execute(_INDEX)


class Queries:
    """The queries the application runs against the images table."""

    def __init__(self, db: sqlite3.Connection) -> None:
        self._db = db
        self._lock = threading.Lock()

    def _fetch_one(self, sql: str, params: tuple) -> tuple:
        with self._lock:
            row = self._db.execute(sql, params).fetchone()
        if row is None:
            raise RowNotFound("no rows in result set")
        return row

    def _fetch_rows(self, sql: str, params: tuple) -> list[ImageRow]:
        with self._lock:
            rows = self._db.execute(sql, params).fetchall()
        return [_row(r) for r in rows]

    def count_images(self) -> int:
        return self._fetch_one("SELECT COUNT(*) FROM images", ())[0]

    def count_search_images(self, name: str) -> int:
        return self._fetch_one(
            "SELECT COUNT(*) FROM images WHERE name LIKE ? OR description LIKE ?",
            (name, name),
        )[0]

    def create_image(
        self,
        name: str,
        description: str | None,
        file_path: str,
        mime_type: str,
        size_bytes: int,
    ) -> ImageRow:
        now = _stamp(datetime.now(timezone.utc))
        with self._lock, self._db:
            cursor = self._db.execute(
                "INSERT INTO images (name, description, file_path, mime_type, size_bytes,"
                " created_at, updated_at) VALUES (?, ?, ?, ?, ?, ?, ?)",
                (name, description, file_path, mime_type, size_bytes, now, now),
            )
            new_id = cursor.lastrowid
        return self.get_image(new_id)

    def delete_image(self, id: int) -> None:
        with self._lock, self._db:
            self._db.execute("DELETE FROM images WHERE id = ?", (id,))

    def get_image(self, id: int) -> ImageRow:
        return _row(
            self._fetch_one(f"SELECT {_COLUMNS} FROM images WHERE id = ? LIMIT 1", (id,))
        )

    def list_images(self, limit: int, offset: int) -> list[ImageRow]:
        return self._fetch_rows(
            f"SELECT {_COLUMNS} FROM images ORDER BY created_at DESC, id DESC"
            " LIMIT ? OFFSET ?",
            (limit, offset),
        )

    def search_images(self, name: str, limit: int, offset: int) -> list[ImageRow]:
        return self._fetch_rows(
            f"SELECT {_COLUMNS} FROM images WHERE name LIKE ? OR description LIKE ?"
            " ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?",
            (name, name, limit, offset),
        )

    def update_image(self, id: int, name: str, description: str | None) -> ImageRow:
        now = _stamp(datetime.now(timezone.utc))
        with self._lock, self._db:
            cursor = self._db.execute(
                "UPDATE images SET name = ?, description = ?, updated_at = ? WHERE id = ?",
                (name, description, now, id),
            )
            changed = cursor.rowcount
        if changed == 0:
            raise RowNotFound("no rows in result set")
        return self.get_image(id)