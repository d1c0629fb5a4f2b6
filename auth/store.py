"""
auth/store.py -- SQLAlchemy Core persistence layer for accounts.

Pattern: Repository + Data Mapper. AccountStore is the repository;
_row_to_account / _row_to_profile are the mappers. Route and dependency code
never touches SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.

  Email uniqueness is a UNIQUE constraint on the column. Two concurrent
  registrations for the same address race at the database, and the loser's
  IntegrityError is translated to DuplicateEmail.

  The read path returns AccountProfile (no password_hash) everywhere except
  get_by_email(), which the login flow needs for bcrypt verification.

Layer rule: no imports from api/ or bookmarks/.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from auth.models import Account, AccountProfile
from core.config import get_settings
from core.errors import DuplicateEmail, NotFound

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_accounts = Table(
    "accounts",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("password_hash", Text, nullable=False),
    Column("first_name", String(100)),
    Column("last_name", String(100)),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)

# Columns a profile edit may touch. Everything else is store-managed.
_EDITABLE_FIELDS = frozenset({"email", "first_name", "last_name"})


# ---------------------------------------------------------------------------
# WAL mode
# ---------------------------------------------------------------------------


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode so readers do not block during writes.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class AccountStore:
    """Repository for Account records.

    Usage:
        store = AccountStore("sqlite:///:memory:")
        profile = store.create("a@b.com", hash_password("password1"))
        account = store.get_by_email("a@b.com")
        store.close()

    Extra keyword arguments go to create_engine, e.g. poolclass=StaticPool
    to keep a named in-memory database on a single connection.
    """

    def __init__(self, db_url: str | None = None, **engine_kwargs) -> None:
        db_url = db_url or get_settings().database_url
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args, **engine_kwargs)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        _metadata.create_all(self.engine)

    def create(self, email: str, password_hash: str) -> AccountProfile:
        """Insert a new account and return its profile.

        Raises DuplicateEmail if the email is already registered.
        """
        now = _now_iso()
        try:
            with self.engine.connect() as conn:
                result = conn.execute(
                    _accounts.insert().values(
                        email=email,
                        password_hash=password_hash,
                        created_at=now,
                        updated_at=now,
                    )
                )
                conn.commit()
        except IntegrityError as exc:
            raise DuplicateEmail() from exc
        return AccountProfile(
            id=result.inserted_primary_key[0],
            email=email,
            created_at=now,
            updated_at=now,
        )

    def get_by_email(self, email: str) -> Account | None:
        """Look up the full credential record by exact email. None if absent."""
        with self.engine.connect() as conn:
            row = conn.execute(_accounts.select().where(_accounts.c.email == email)).fetchone()
        return _row_to_account(row) if row is not None else None

    def get_profile(self, account_id: int) -> AccountProfile | None:
        """Look up an account's public profile by primary key. None if absent."""
        with self.engine.connect() as conn:
            row = conn.execute(_accounts.select().where(_accounts.c.id == account_id)).fetchone()
        return _row_to_profile(row) if row is not None else None

    def update(self, account_id: int, **fields) -> AccountProfile:
        """Apply a partial profile update and return the fresh profile.

        Accepted fields: email, first_name, last_name. Anything else is a
        programming error and raises ValueError before touching the DB.

        Raises NotFound if account_id does not exist, DuplicateEmail if the
        new email belongs to another account.
        """
        unknown = set(fields) - _EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown account fields: {sorted(unknown)!r}")
        try:
            with self.engine.connect() as conn:
                result = conn.execute(
                    _accounts.update().where(_accounts.c.id == account_id).values(updated_at=_now_iso(), **fields)
                )
                conn.commit()
        except IntegrityError as exc:
            raise DuplicateEmail() from exc
        if result.rowcount == 0:
            raise NotFound("Account not found.")
        profile = self.get_profile(account_id)
        if profile is None:
            # Deleted between the UPDATE and the re-read.
            raise NotFound("Account not found.")
        return profile

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_account(row) -> Account:
    return Account(
        id=row.id,
        email=row.email,
        password_hash=row.password_hash,
        first_name=row.first_name,
        last_name=row.last_name,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _row_to_profile(row) -> AccountProfile:
    return AccountProfile(
        id=row.id,
        email=row.email,
        first_name=row.first_name,
        last_name=row.last_name,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
