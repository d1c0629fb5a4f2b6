"""
API request and response models for the Shelf REST endpoints.

These Pydantic v2 models define the HTTP transport contract. They are
intentionally separate from the dataclasses in auth/models.py and
bookmarks/models.py, which own the internal domain representation. Route
handlers map between the two.

AccountResponse is built from AccountProfile, which has no password_hash, so
no response model can ever carry a hash.

Account and bookmark payloads use camelCase keys on the wire (firstName,
createdAt). Handlers and stores keep snake_case field names; FastAPI
serializes response_model by alias. The login response keeps access_token.
"""

from typing import Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from auth.models import AccountProfile
from bookmarks.models import Bookmark

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

PASSWORD_MIN_LENGTH = 8
# bcrypt ignores (4.x) or rejects (5.x) input past 72 bytes.
PASSWORD_MAX_BYTES = 72


def _check_password_bytes(value: str) -> str:
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"password must be at most {PASSWORD_MAX_BYTES} bytes when UTF-8 encoded")
    return value


def _check_link(value: str) -> str:
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("link must be an absolute http(s) URL")
    return value


# ---------------------------------------------------------------------------
# Shared envelopes
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class Credentials(BaseModel):
    """Request body for POST /auth/register and POST /auth/login."""

    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_BYTES)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return _check_password_bytes(value)


class TokenResponse(BaseModel):
    """Response for POST /auth/login."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


class AccountResponse(BaseModel):
    """Public view of an account. There is no password_hash field."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_profile(cls, profile: AccountProfile) -> "AccountResponse":
        return cls(
            id=profile.id,
            email=profile.email,
            first_name=profile.first_name,
            last_name=profile.last_name,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )


class AccountPatch(BaseModel):
    """Request body for PATCH /users/me. Only fields present are changed.

    first_name / last_name may be set to null to clear them; email may not.
    Keys are camelCase on the wire (firstName); snake_case is accepted too.
    """

    model_config = ConfigDict(str_strip_whitespace=True, alias_generator=to_camel, populate_by_name=True)

    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)

    @field_validator("email")
    @classmethod
    def email_not_null(cls, value: Optional[str]) -> str:
        if value is None:
            raise ValueError("email cannot be null")
        return value


# ---------------------------------------------------------------------------
# Bookmarks
# ---------------------------------------------------------------------------


class BookmarkCreate(BaseModel):
    """Request body for POST /bookmarks."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=255)
    link: str = Field(min_length=1, max_length=2048)
    description: Optional[str] = Field(default=None, max_length=5000)

    @field_validator("link")
    @classmethod
    def link_is_http_url(cls, value: str) -> str:
        return _check_link(value)


class BookmarkPatch(BaseModel):
    """Request body for PATCH /bookmarks/{id}. Only fields present are changed.

    description may be set to null to clear it; title and link may not.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    link: Optional[str] = Field(default=None, min_length=1, max_length=2048)
    description: Optional[str] = Field(default=None, max_length=5000)

    @field_validator("title")
    @classmethod
    def title_not_null(cls, value: Optional[str]) -> str:
        if value is None:
            raise ValueError("title cannot be null")
        return value

    @field_validator("link")
    @classmethod
    def link_is_http_url(cls, value: Optional[str]) -> str:
        if value is None:
            raise ValueError("link cannot be null")
        return _check_link(value)


class BookmarkResponse(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    title: str
    link: str
    description: Optional[str] = None
    created_at: str
    updated_at: str

    @classmethod
    def from_bookmark(cls, bookmark: Bookmark) -> "BookmarkResponse":
        return cls(
            id=bookmark.id,
            title=bookmark.title,
            link=bookmark.link,
            description=bookmark.description,
            created_at=bookmark.created_at,
            updated_at=bookmark.updated_at,
        )
