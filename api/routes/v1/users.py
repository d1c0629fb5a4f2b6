"""
api/routes/v1/users.py -- Current-account profile endpoints.

Routes:
  GET   /users/me  -- the caller's profile
  PATCH /users/me  -- partial update of email / first_name / last_name

Both require a bearer token. There is no endpoint for deleting an account.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from api.models import AccountPatch, AccountResponse
from auth.dependencies import get_current_account
from auth.models import AccountProfile
from auth.store import AccountStore
from core.errors import ValidationFailed

# Router-level dependency: every route here is protected.
router = APIRouter(dependencies=[Depends(get_current_account)])


@router.get("/users/me", response_model=AccountResponse)
def get_me(account: AccountProfile = Depends(get_current_account)) -> AccountResponse:
    """Return the profile of the account the token was issued to."""
    return AccountResponse.from_profile(account)


@router.patch("/users/me", response_model=AccountResponse)
def update_me(
    request: Request,
    body: AccountPatch,
    account: AccountProfile = Depends(get_current_account),
) -> AccountResponse:
    """Apply a partial profile update.

    Only fields present in the body are written; an empty body is a 400.
    Changing email to one already registered is a 409.
    """
    updates = body.model_dump(exclude_unset=True)
    if not updates:
        raise ValidationFailed("No fields to update.")
    store: AccountStore = request.app.state.account_store
    updated = store.update(account.id, **updates)
    return AccountResponse.from_profile(updated)
