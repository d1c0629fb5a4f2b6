"""
auth/tokens.py -- Signed, expiring access tokens.

Security design decisions:
  JWT: python-jose with HS256. A token carries only the account id (sub),
       issued-at (iat) and expiry (exp). It is never stored server-side, so
       validity is purely signature + expiry -- there is no revocation before
       natural expiry.

  Failure modes: verify() raises ExpiredToken when the signature is good but
       exp has passed, and InvalidToken for everything else. The request
       authorizer maps both to one 401; the distinction exists for logging
       and tests.

  SECRET_KEY: passed in by the caller (api/main.py reads it from
       core.config.get_settings() once at startup). The codec never re-reads
       configuration, so the key cannot change mid-process.

Layer rule: no imports from api/ or bookmarks/.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from core.errors import ExpiredToken, InvalidToken

_ALGORITHM = "HS256"


class TokenCodec:
    """Issue and verify HS256 access tokens for a single signing key.

    Usage:
        codec = TokenCodec(settings.secret_key, settings.token_expire_seconds)
        token = codec.issue(42)
        codec.verify(token)  # -> 42
    """

    def __init__(self, secret_key: str, lifetime_seconds: int = 900) -> None:
        if lifetime_seconds <= 0:
            raise ValueError("lifetime_seconds must be positive")
        self._secret_key = secret_key
        self.lifetime_seconds = lifetime_seconds

    def issue(self, subject_id: int, issued_at: datetime | None = None) -> str:
        """Encode a signed token for subject_id.

        issued_at defaults to now (UTC). Passing an explicit time is how
        tests mint tokens that are already expired.
        """
        iat = issued_at or datetime.now(timezone.utc)
        payload = {
            "sub": str(subject_id),
            "iat": iat,
            "exp": iat + timedelta(seconds=self.lifetime_seconds),
        }
        return jwt.encode(payload, self._secret_key, algorithm=_ALGORITHM)

    def verify(self, token: str) -> int:
        """Return the subject id carried by a valid token.

        Raises ExpiredToken if the signature is valid but the token has
        expired, InvalidToken on any other failure.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[_ALGORITHM],
                options={"require_exp": True, "require_sub": True},
            )
        except ExpiredSignatureError as exc:
            raise ExpiredToken() from exc
        except JWTError as exc:
            raise InvalidToken() from exc

        try:
            return int(payload["sub"])
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidToken("Token subject is not an account id.") from exc
