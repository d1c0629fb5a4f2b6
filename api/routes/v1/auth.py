"""
api/routes/v1/auth.py -- Registration and login endpoints.

Routes:
  POST /auth/register  -- create an account; 201 with the public profile
  POST /auth/login     -- exchange email + password for a bearer token

Auth policy: both routes are public. They are the only way to obtain a token.

Security:
  [H2] Both routes are rate-limited per client IP (LOGIN_RATE_LIMIT,
       REGISTER_RATE_LIMIT).
  [C1] Authenticator.login() equalizes timing between unknown email and
       wrong password -- use it, never inline get_by_email() + verify_password().
  [M5] Cache-Control: no-store on login responses (they carry a credential).

Errors (DuplicateEmail -> 409, InvalidCredentials -> 401) are raised by the
Authenticator and rendered by the AppError handler in api/main.py.
"""

from __future__ import annotations

from fastapi import APIRouter, Request, Response

from api.limiter import limiter
from api.models import AccountResponse, Credentials, TokenResponse
from auth.service import Authenticator
from core.config import get_settings

router = APIRouter()

_settings = get_settings()


@limiter.limit(_settings.register_rate_limit)  # [H2] must be ABOVE @router to preserve FastAPI introspection
@router.post("/auth/register", response_model=AccountResponse, status_code=201)
def register(request: Request, body: Credentials) -> AccountResponse:
    """Create a new account.

    The response is the public profile; the password hash never leaves the
    store layer.
    """
    authenticator: Authenticator = request.app.state.authenticator
    profile = authenticator.register(body.email, body.password)
    return AccountResponse.from_profile(profile)


@limiter.limit(_settings.login_rate_limit)  # [H2]
@router.post("/auth/login", response_model=TokenResponse)
def login(request: Request, response: Response, body: Credentials) -> TokenResponse:
    """Authenticate with email and password; return an access token.

    Unknown email and wrong password produce the same 401
    ("invalid_credentials") so the response does not reveal which emails
    are registered.
    """
    authenticator: Authenticator = request.app.state.authenticator
    issued = authenticator.login(body.email, body.password)
    response.headers["Cache-Control"] = "no-store"  # [M5]
    return TokenResponse(
        access_token=issued.access_token,
        token_type=issued.token_type,
        expires_in=issued.expires_in,
    )
