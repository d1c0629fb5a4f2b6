"""
auth/passwords.py -- bcrypt password hashing.

bcrypt is used directly rather than through passlib: passlib's wrap-bug
detection feeds bcrypt a >72-byte password, which bcrypt 4.x rejects.

bcrypt only looks at the first 72 bytes of input (and 5.x refuses longer
input outright). The API layer caps passwords at 72 UTF-8 bytes, so
hash_password() never sees anything longer.

The _DUMMY_HASH constant enables timing equalization in the login flow so
response time does not reveal whether an email is registered [C1].
"""

from __future__ import annotations

import bcrypt

from core.config import get_settings


def hash_password(plain: str) -> str:
    """Return a salted bcrypt hash of the plaintext password."""
    rounds = get_settings().bcrypt_rounds
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    bcrypt.checkpw compares in constant time. A malformed hash is a
    mismatch, not an error.
    """
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


# Computed once at import with the configured cost, so checking it costs
# the same as checking a real account's hash.
_DUMMY_HASH: str = hash_password("shelf_timing_dummy")


def burn_verify(plain: str) -> None:
    """Run a full bcrypt check against the dummy hash and discard the result [C1]."""
    verify_password(plain, _DUMMY_HASH)
