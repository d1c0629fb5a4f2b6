"""
auth/dependencies.py -- Request admission gate for protected routes.

get_current_account() is a FastAPI dependency attached at router level to
every protected router (api/routes/v1/users.py, api/routes/v1/bookmarks.py).
The set of protected routes is therefore exactly the routers declared with
dependencies=[Depends(get_current_account)] -- nothing is inferred.

Order of checks for each request:
  1. Authorization header present and shaped "Bearer <token>".
  2. Token signature and expiry verified by the TokenCodec.
  3. Subject resolved to an existing account via the AccountStore.
Only then is the profile attached to request.state.account and the handler run.

Every failure raises Unauthenticated (401). The internal reason (missing
header, expired, bad signature, account gone) goes to the log, never to the
client, and the token itself is never logged.

Layer rule: no imports from api/ or bookmarks/. FastAPI's Request is allowed
because this module is part of the dependency injection surface.
"""

from __future__ import annotations

import logging

from fastapi import Request

from auth.models import AccountProfile
from auth.store import AccountStore
from auth.tokens import TokenCodec
from core.errors import ExpiredToken, InvalidToken, Unauthenticated

logger = logging.getLogger("shelf.auth")


def extract_bearer_token(header: str | None) -> str:
    """Return the token from an "Authorization: Bearer <token>" header value.

    The scheme is matched case-insensitively (RFC 7235). Raises
    Unauthenticated if the header is absent or has any other shape.
    """
    if not header:
        raise Unauthenticated()
    parts = header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise Unauthenticated()
    return parts[1]


def get_current_account(request: Request) -> AccountProfile:
    """Admit the request only if it carries a valid token for a live account.

    Use as a router-level dependency:
        router = APIRouter(dependencies=[Depends(get_current_account)])

    or per handler, to receive the profile:
        def route(account: AccountProfile = Depends(get_current_account)): ...

    FastAPI caches dependency results per request, so declaring it at both
    levels still runs the checks once.
    """
    codec: TokenCodec = request.app.state.token_codec
    store: AccountStore = request.app.state.account_store

    token = extract_bearer_token(request.headers.get("Authorization"))

    try:
        account_id = codec.verify(token)
    except ExpiredToken as exc:
        logger.info("Rejected expired token on %s %s", request.method, request.url.path)
        raise Unauthenticated() from exc
    except InvalidToken as exc:
        logger.info("Rejected invalid token on %s %s", request.method, request.url.path)
        raise Unauthenticated() from exc

    account = store.get_profile(account_id)
    if account is None:
        logger.info("Rejected token for missing account %d", account_id)
        raise Unauthenticated()

    request.state.account = account
    return account
