"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Stores and the
authenticator do the work.

Two shapes for the same row:
  Account        -- the full credential record, including password_hash.
                    Only AccountStore.get_by_email() returns it, and only the
                    login path consumes it.
  AccountProfile -- the read projection. It has no password_hash field at
                    all, so serializing one can never leak a hash.

Layer rule: no imports from api/ or bookmarks/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Account:
    """A registered account with its credential.

    password_hash is a bcrypt string (salt embedded). The raw password is
    never stored anywhere.
    """

    email: str
    password_hash: str
    id: int | None = None
    first_name: str | None = None
    last_name: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


@dataclass(frozen=True)
class AccountProfile:
    """Public view of an Account -- everything except the credential."""

    id: int
    email: str
    first_name: str | None = None
    last_name: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


@dataclass(frozen=True)
class AccessToken:
    """Result of a successful login."""

    access_token: str
    expires_in: int
    token_type: str = "bearer"
