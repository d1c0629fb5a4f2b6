"""
bookmarks/store.py -- SQLAlchemy-backed persistence layer for bookmarks.

Uses SQLAlchemy Core (not ORM) so the dataclass in bookmarks/models.py stays
the authoritative domain representation.

Pattern: Repository + Data Mapper. BookmarkStore is the repository;
_row_to_bookmark is the mapper. Route handlers never touch SQL directly.

Ownership: every read and write carries owner_id in its WHERE clause. A
bookmark that belongs to someone else is indistinguishable from one that does
not exist -- get() returns None, update() returns None, delete() returns False.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = BookmarkStore("sqlite:///:memory:")
    created = store.create(Bookmark(owner_id=1, title="Docs", link="https://..."))
    store.list_for_owner(1)
    store.update(1, created.id, title="New title")
    store.delete(1, created.id)
    store.close()
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Index, Integer, MetaData, String, Table, Text, create_engine, event
from sqlalchemy.engine import Engine

from bookmarks.models import Bookmark
from core.config import get_settings

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_bookmarks = Table(
    "bookmarks",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("owner_id", Integer, nullable=False),
    Column("title", String(255), nullable=False),
    Column("description", Text),
    Column("link", Text, nullable=False),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
    Index("ix_bookmarks_owner_id", "owner_id"),
)

_EDITABLE_FIELDS = frozenset({"title", "description", "link"})


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


class BookmarkStore:
    def __init__(self, db_url: Optional[str] = None, **engine_kwargs) -> None:
        """engine_kwargs go straight to create_engine (e.g. poolclass)."""
        db_url = db_url or get_settings().database_url
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            # FastAPI runs sync handlers in a threadpool, so one pooled
            # connection may be used from several threads.
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args, **engine_kwargs)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        metadata.create_all(self.engine)

    def create(self, bookmark: Bookmark) -> Bookmark:
        """Insert a bookmark and return it with id and timestamps filled in."""
        now = _now_iso()
        with self.engine.connect() as conn:
            result = conn.execute(
                _bookmarks.insert().values(
                    owner_id=bookmark.owner_id,
                    title=bookmark.title,
                    description=bookmark.description,
                    link=bookmark.link,
                    created_at=now,
                    updated_at=now,
                )
            )
            conn.commit()
        return Bookmark(
            id=result.inserted_primary_key[0],
            owner_id=bookmark.owner_id,
            title=bookmark.title,
            description=bookmark.description,
            link=bookmark.link,
            created_at=now,
            updated_at=now,
        )

    def list_for_owner(self, owner_id: int) -> list[Bookmark]:
        """Return every bookmark owned by owner_id, oldest first."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                _bookmarks.select().where(_bookmarks.c.owner_id == owner_id).order_by(_bookmarks.c.id)
            ).fetchall()
        return [_row_to_bookmark(r) for r in rows]

    def get(self, owner_id: int, bookmark_id: int) -> Optional[Bookmark]:
        """Fetch one bookmark if it exists and belongs to owner_id."""
        with self.engine.connect() as conn:
            row = conn.execute(
                _bookmarks.select().where((_bookmarks.c.id == bookmark_id) & (_bookmarks.c.owner_id == owner_id))
            ).fetchone()
        return _row_to_bookmark(row) if row is not None else None

    def update(self, owner_id: int, bookmark_id: int, **fields) -> Optional[Bookmark]:
        """Update title, description and/or link on an owned bookmark.

        Returns the updated bookmark, or None if bookmark_id does not exist
        or belongs to another owner. Unknown field names raise ValueError.
        """
        unknown = set(fields) - _EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown bookmark fields: {sorted(unknown)!r}")
        with self.engine.connect() as conn:
            result = conn.execute(
                _bookmarks.update()
                .where((_bookmarks.c.id == bookmark_id) & (_bookmarks.c.owner_id == owner_id))
                .values(updated_at=_now_iso(), **fields)
            )
            conn.commit()
        if result.rowcount == 0:
            return None
        return self.get(owner_id, bookmark_id)

    def delete(self, owner_id: int, bookmark_id: int) -> bool:
        """Delete an owned bookmark. Returns False if not found or not owned."""
        with self.engine.connect() as conn:
            result = conn.execute(
                _bookmarks.delete().where((_bookmarks.c.id == bookmark_id) & (_bookmarks.c.owner_id == owner_id))
            )
            conn.commit()
        return result.rowcount > 0

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_bookmark(row) -> Bookmark:
    return Bookmark(
        id=row.id,
        owner_id=row.owner_id,
        title=row.title,
        description=row.description,
        link=row.link,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
