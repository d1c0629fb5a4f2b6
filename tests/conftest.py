"""
tests/conftest.py -- Shared test fixtures for Shelf.

This module provides:
  - _make_test_stores(): isolated in-memory DB for accounts + bookmarks
  - _patch_lifespan(): wires test collaborators into app.state, bypassing real startup
  - api_client: (client, codec) -- TestClient over the real app
  - make_account: factory that registers + logs in a fresh account via the API
  - flip_signature_bit: corrupts exactly one bit of a JWT signature

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker thread.
Each store pins its engine to one connection with StaticPool, so the shared
cache always has a live connection and the database is never dropped.

Environment must be set before any app import so get_settings() sees it:
  DEBUG=true             -- auto-generate SECRET_KEY instead of refusing to start
  BCRYPT_ROUNDS=4        -- minimum bcrypt cost keeps the suite fast
  RATE_LIMIT_ENABLED=false -- the suite logs in far more than 10/minute
  ALLOWED_HOSTS          -- TestClient sends Host: testserver
"""

from __future__ import annotations

import base64
import os
import uuid
from collections.abc import Callable, Generator
from contextlib import asynccontextmanager

# CRITICAL: set before any core/auth/api import.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("ALLOWED_HOSTS", '["testserver", "localhost"]')
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from api.main import app
from auth.service import Authenticator
from auth.store import AccountStore
from auth.tokens import TokenCodec
from bookmarks.store import BookmarkStore
from core.config import get_settings

# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _make_test_stores(db_suffix: str) -> tuple[AccountStore, BookmarkStore]:
    """Create stores over one named shared-memory SQLite database.

    Args:
        db_suffix: Unique string appended to the DB name so test modules
                   don't share state.
    """
    url = f"sqlite:///file:test_shelf_{db_suffix}?mode=memory&cache=shared&uri=true"
    return AccountStore(db_url=url, poolclass=StaticPool), BookmarkStore(db_url=url, poolclass=StaticPool)


def _patch_lifespan(account_store: AccountStore, bookmark_store: BookmarkStore, codec: TokenCodec):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.account_store = account_store
        app.state.bookmark_store = bookmark_store
        app.state.token_codec = codec
        app.state.authenticator = Authenticator(account_store, codec)
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def api_client(request) -> Generator[tuple[TestClient, TokenCodec], None, None]:
    """Yield (client, codec) for API integration tests.

    One TestClient per test module, each with its own database. The codec
    is the one the app verifies with, so tests can mint tokens directly
    (e.g. already-expired ones).
    """
    account_store, bookmark_store = _make_test_stores(request.module.__name__.rsplit(".", 1)[-1])
    settings = get_settings()
    codec = TokenCodec(settings.secret_key, settings.token_expire_seconds)

    app.router.lifespan_context = _patch_lifespan(account_store, bookmark_store, codec)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, codec

    bookmark_store.close()
    account_store.close()


@pytest.fixture
def make_account(api_client) -> Callable[..., tuple[dict, dict[str, str]]]:
    """Factory: register and log in a brand-new account through the API.

    Returns (account_json, auth_headers). Emails are unique per call so tests
    sharing the module-scoped database never collide.
    """
    client, _codec = api_client

    def _make(password: str = "password123") -> tuple[dict, dict[str, str]]:
        email = f"user-{uuid.uuid4().hex[:12]}@shelf.io"
        reg = client.post("/auth/register", json={"email": email, "password": password})
        assert reg.status_code == 201, reg.text
        login = client.post("/auth/login", json={"email": email, "password": password})
        assert login.status_code == 200, login.text
        return reg.json(), {"Authorization": f"Bearer {login.json()['access_token']}"}

    return _make


@pytest.fixture
def flip_signature_bit() -> Callable[[str], str]:
    """Return a function that flips the lowest bit of a JWT's first signature byte.

    Operates on the decoded bytes so the change can't be absorbed by
    base64 padding bits.
    """

    def _flip(token: str) -> str:
        header, payload, signature = token.split(".")
        raw = bytearray(base64.urlsafe_b64decode(signature + "=" * (-len(signature) % 4)))
        raw[0] ^= 0x01
        flipped = base64.urlsafe_b64encode(bytes(raw)).rstrip(b"=").decode("ascii")
        return f"{header}.{payload}.{flipped}"

    return _flip
