"""
core/config.py -- Shelf settings, read from the environment.

Settings is a pydantic-settings model: each field is filled from the
environment variable of the same name in upper case (TOKEN_EXPIRE_SECONDS,
BCRYPT_ROUNDS, ...) or from a .env file in the working directory. List
fields such as ALLOWED_HOSTS take a JSON array.

get_settings() builds Settings on first call and caches it, so the signing
key and database URL are fixed for the life of the process. Modules that
need configuration call get_settings(); nothing else reads os.environ.

The signing key is the one setting without a usable default. Local runs with
DEBUG=true get a throwaway key; any other run must supply SECRET_KEY, and it
must be at least 32 characters.

Layer rule: core/ is the kernel. This module may not import from api/, auth/,
or bookmarks/.
"""

import logging
import secrets
from functools import lru_cache
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("shelf.config")

MIN_SECRET_KEY_LENGTH = 32
_DEFAULT_DB_URL = f"sqlite:///{Path(__file__).resolve().parent.parent / 'shelf.db'}"


class Settings(BaseSettings):
    """Everything Shelf can be configured with.

    Only secret_key lacks a working default; tests run with DEBUG=true
    so one is generated.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    # Empty string is the "not configured" sentinel; see ensure_signing_key.
    secret_key: str = ""
    database_url: str = _DEFAULT_DB_URL

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    # Access tokens live 15 minutes. There is no refresh or revocation.
    token_expire_seconds: int = Field(default=900, gt=0)
    # bcrypt accepts cost factors 4..31. Tests drop this to 4.
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # ------------------------------------------------------------------
    # Rate limiting
    # ------------------------------------------------------------------

    rate_limit_enabled: bool = True
    login_rate_limit: str = "10/minute"
    register_rate_limit: str = "5/minute"

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    allowed_hosts: list[str] = ["localhost", "127.0.0.1", "*.localhost"]
    cors_origins: list[str] = ["http://localhost", "http://localhost:3000", "http://127.0.0.1"]

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def ensure_signing_key(self) -> "Settings":
        """Fill in or check the token signing key.

        With no SECRET_KEY, a debug run gets a random one (every restart
        invalidates outstanding tokens) and a non-debug run fails here.
        """
        if not self.secret_key:
            if not self.debug:
                raise ValueError("SECRET_KEY must be set unless DEBUG=true.")
            self.secret_key = secrets.token_hex(32)
            logger.warning("SECRET_KEY not set; signing tokens with a per-process random key.")
        if len(self.secret_key) < MIN_SECRET_KEY_LENGTH:
            raise ValueError(f"SECRET_KEY must be at least {MIN_SECRET_KEY_LENGTH} characters.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide Settings, built on first call.

    Tests that change the environment afterwards must call
    get_settings.cache_clear().
    """
    return Settings()
