"""
api/routes/v1/bookmarks.py -- Owner-scoped bookmark CRUD.

Routes:
  GET    /bookmarks                 -- list the caller's bookmarks
  POST   /bookmarks                 -- create a bookmark
  GET    /bookmarks/{bookmark_id}   -- fetch one
  PATCH  /bookmarks/{bookmark_id}   -- partial update
  DELETE /bookmarks/{bookmark_id}   -- delete; 204

Every route requires a bearer token, and every store call passes the
caller's account id. Another account's bookmark is reported as 404, the same
as a missing one, so ids cannot be probed for existence.
"""

from fastapi import APIRouter, Depends, Request, Response

from api.models import BookmarkCreate, BookmarkPatch, BookmarkResponse
from auth.dependencies import get_current_account
from auth.models import AccountProfile
from bookmarks.models import Bookmark
from bookmarks.store import BookmarkStore
from core.errors import NotFound, ValidationFailed

router = APIRouter(dependencies=[Depends(get_current_account)])

_NOT_FOUND = "Bookmark not found."


@router.get("/bookmarks", response_model=list[BookmarkResponse])
def list_bookmarks(
    request: Request,
    account: AccountProfile = Depends(get_current_account),
) -> list[BookmarkResponse]:
    store: BookmarkStore = request.app.state.bookmark_store
    return [BookmarkResponse.from_bookmark(b) for b in store.list_for_owner(account.id)]


@router.post("/bookmarks", response_model=BookmarkResponse, status_code=201)
def create_bookmark(
    request: Request,
    body: BookmarkCreate,
    account: AccountProfile = Depends(get_current_account),
) -> BookmarkResponse:
    store: BookmarkStore = request.app.state.bookmark_store
    created = store.create(
        Bookmark(
            owner_id=account.id,
            title=body.title,
            link=body.link,
            description=body.description,
        )
    )
    return BookmarkResponse.from_bookmark(created)


@router.get("/bookmarks/{bookmark_id}", response_model=BookmarkResponse)
def get_bookmark(
    request: Request,
    bookmark_id: int,
    account: AccountProfile = Depends(get_current_account),
) -> BookmarkResponse:
    store: BookmarkStore = request.app.state.bookmark_store
    bookmark = store.get(account.id, bookmark_id)
    if bookmark is None:
        raise NotFound(_NOT_FOUND)
    return BookmarkResponse.from_bookmark(bookmark)


@router.patch("/bookmarks/{bookmark_id}", response_model=BookmarkResponse)
def update_bookmark(
    request: Request,
    bookmark_id: int,
    body: BookmarkPatch,
    account: AccountProfile = Depends(get_current_account),
) -> BookmarkResponse:
    """Change title, link and/or description. An empty body is a 400."""
    updates = body.model_dump(exclude_unset=True)
    if not updates:
        raise ValidationFailed("No fields to update.")
    store: BookmarkStore = request.app.state.bookmark_store
    updated = store.update(account.id, bookmark_id, **updates)
    if updated is None:
        raise NotFound(_NOT_FOUND)
    return BookmarkResponse.from_bookmark(updated)


@router.delete("/bookmarks/{bookmark_id}", status_code=204)
def delete_bookmark(
    request: Request,
    bookmark_id: int,
    account: AccountProfile = Depends(get_current_account),
) -> Response:
    store: BookmarkStore = request.app.state.bookmark_store
    if not store.delete(account.id, bookmark_id):
        raise NotFound(_NOT_FOUND)
    return Response(status_code=204)
