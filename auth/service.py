"""
auth/service.py -- Registration and login orchestration.

Authenticator glues the credential store, bcrypt, and the token codec
together. It owns no state beyond its two collaborators, both injected
through the constructor (api/main.py builds one per process in lifespan).

Security:
  [C1] login() always runs bcrypt, even for an unknown email, so response
       time does not reveal which emails are registered. Unknown email and
       wrong password raise the same InvalidCredentials.

  Raw passwords are never logged; only account ids are.
"""

from __future__ import annotations

import logging

from auth.models import AccessToken, AccountProfile
from auth.passwords import burn_verify, hash_password, verify_password
from auth.store import AccountStore
from auth.tokens import TokenCodec
from core.errors import InvalidCredentials

logger = logging.getLogger("shelf.auth")


class Authenticator:
    def __init__(self, store: AccountStore, codec: TokenCodec) -> None:
        self.store = store
        self.codec = codec

    def register(self, email: str, password: str) -> AccountProfile:
        """Hash the password, persist a new account, and return its profile.

        Input shape (valid email, password length) is checked by the request
        model before this is called. Raises DuplicateEmail if the email is
        taken.
        """
        profile = self.store.create(email, hash_password(password))
        logger.info("Registered account %d", profile.id)
        return profile

    def login(self, email: str, password: str) -> AccessToken:
        """Verify credentials and issue an access token.

        Raises InvalidCredentials for an unknown email or a wrong password.
        """
        account = self.store.get_by_email(email)
        if account is None:
            # Do NOT return before running bcrypt [C1].
            burn_verify(password)
            logger.info("Login failed: unknown email")
            raise InvalidCredentials()
        if not verify_password(password, account.password_hash):
            logger.info("Login failed for account %d: bad password", account.id)
            raise InvalidCredentials()

        token = self.codec.issue(account.id)
        logger.info("Login: account %d", account.id)
        return AccessToken(access_token=token, expires_in=self.codec.lifetime_seconds)
