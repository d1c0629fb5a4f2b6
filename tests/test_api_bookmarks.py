"""
tests/test_api_bookmarks.py -- Integration tests for /bookmarks CRUD.

Coverage:
  - Every route rejects unauthenticated requests with 401
  - Full lifecycle: empty list -> create 201 -> list 1 -> get -> patch -> delete 204 -> empty
  - Another account's bookmark is 404 on get/patch/delete and absent from list
  - Input validation: missing title, non-http link, empty patch -> 400
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from auth.tokens import TokenCodec

_BOOKMARK = {
    "title": "First Bookmark",
    "link": "https://www.youtube.com/watch?v=d6WC5n9G_sM",
}


class TestBookmarksAuth:
    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/bookmarks"),
            ("POST", "/bookmarks"),
            ("GET", "/bookmarks/1"),
            ("PATCH", "/bookmarks/1"),
            ("DELETE", "/bookmarks/1"),
        ],
    )
    def test_unauthenticated(self, api_client: tuple[TestClient, TokenCodec], method: str, path: str) -> None:
        """The admission gate runs before body validation, so no body is needed."""
        client, _codec = api_client
        resp = client.request(method, path)
        assert resp.status_code == 401, resp.text


class TestBookmarkLifecycle:
    def test_crud_round_trip(self, api_client: tuple[TestClient, TokenCodec], make_account) -> None:
        client, _codec = api_client
        _account, headers = make_account()

        empty = client.get("/bookmarks", headers=headers)
        assert empty.status_code == 200
        assert empty.json() == []

        created = client.post("/bookmarks", json=_BOOKMARK, headers=headers)
        assert created.status_code == 201, created.text
        bookmark_id = created.json()["id"]
        assert created.json()["title"] == _BOOKMARK["title"]
        assert created.json()["description"] is None
        assert set(created.json()) == {"id", "title", "link", "description", "createdAt", "updatedAt"}

        listed = client.get("/bookmarks", headers=headers)
        assert len(listed.json()) == 1

        fetched = client.get(f"/bookmarks/{bookmark_id}", headers=headers)
        assert fetched.status_code == 200
        assert fetched.json()["id"] == bookmark_id

        edit = {
            "title": "Kubernetes Course - Full Beginners Tutorial (Containerize Your Apps!)",
            "description": "Learn how to use Kubernetes in this complete course.",
        }
        patched = client.patch(f"/bookmarks/{bookmark_id}", json=edit, headers=headers)
        assert patched.status_code == 200, patched.text
        assert patched.json()["title"] == edit["title"]
        assert patched.json()["description"] == edit["description"]
        assert patched.json()["link"] == _BOOKMARK["link"]

        deleted = client.delete(f"/bookmarks/{bookmark_id}", headers=headers)
        assert deleted.status_code == 204
        assert deleted.content == b""

        assert client.get("/bookmarks", headers=headers).json() == []
        assert client.get(f"/bookmarks/{bookmark_id}", headers=headers).status_code == 404

    def test_patch_can_clear_description(self, api_client: tuple[TestClient, TokenCodec], make_account) -> None:
        client, _codec = api_client
        _account, headers = make_account()
        created = client.post("/bookmarks", json={**_BOOKMARK, "description": "temp"}, headers=headers).json()
        resp = client.patch(f"/bookmarks/{created['id']}", json={"description": None}, headers=headers)
        assert resp.status_code == 200
        assert resp.json()["description"] is None


class TestBookmarkOwnership:
    def test_other_account_gets_404(self, api_client: tuple[TestClient, TokenCodec], make_account) -> None:
        client, _codec = api_client
        _alice, alice_headers = make_account()
        _bob, bob_headers = make_account()

        bookmark_id = client.post("/bookmarks", json=_BOOKMARK, headers=alice_headers).json()["id"]

        assert client.get("/bookmarks", headers=bob_headers).json() == []
        assert client.get(f"/bookmarks/{bookmark_id}", headers=bob_headers).status_code == 404
        patch = client.patch(f"/bookmarks/{bookmark_id}", json={"title": "mine now"}, headers=bob_headers)
        assert patch.status_code == 404
        assert patch.json()["error"]["code"] == "not_found"
        assert client.delete(f"/bookmarks/{bookmark_id}", headers=bob_headers).status_code == 404

        # Untouched for the owner.
        still = client.get(f"/bookmarks/{bookmark_id}", headers=alice_headers)
        assert still.status_code == 200
        assert still.json()["title"] == _BOOKMARK["title"]


class TestBookmarkValidation:
    @pytest.mark.parametrize(
        "body",
        [
            {"link": "https://example.com"},
            {"title": "", "link": "https://example.com"},
            {"title": "No link"},
            {"title": "Bad link", "link": "javascript:alert(1)"},
            {"title": "Relative", "link": "/just/a/path"},
        ],
        ids=["no-title", "empty-title", "no-link", "js-link", "relative-link"],
    )
    def test_create_invalid(self, api_client: tuple[TestClient, TokenCodec], make_account, body: dict) -> None:
        client, _codec = api_client
        _account, headers = make_account()
        resp = client.post("/bookmarks", json=body, headers=headers)
        assert resp.status_code == 400, resp.text

    def test_empty_patch(self, api_client: tuple[TestClient, TokenCodec], make_account) -> None:
        client, _codec = api_client
        _account, headers = make_account()
        bookmark_id = client.post("/bookmarks", json=_BOOKMARK, headers=headers).json()["id"]
        resp = client.patch(f"/bookmarks/{bookmark_id}", json={}, headers=headers)
        assert resp.status_code == 400

    def test_null_title_patch(self, api_client: tuple[TestClient, TokenCodec], make_account) -> None:
        client, _codec = api_client
        _account, headers = make_account()
        bookmark_id = client.post("/bookmarks", json=_BOOKMARK, headers=headers).json()["id"]
        resp = client.patch(f"/bookmarks/{bookmark_id}", json={"title": None}, headers=headers)
        assert resp.status_code == 400

    def test_non_integer_id(self, api_client: tuple[TestClient, TokenCodec], make_account) -> None:
        client, _codec = api_client
        _account, headers = make_account()
        assert client.get("/bookmarks/abc", headers=headers).status_code == 400
