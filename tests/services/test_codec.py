"""Tests for the container codec."""

from __future__ import annotations

import json
from datetime import UTC, datetime

import pytest

from vole_store.core.errors import ValidationError
from vole_store.services import codec
from vole_store.store import File, Post, User

FILE_HASH = "0f" * 32


def _post(**overrides) -> Post:
    fields = {
        "owner_id": "alice",
        "id": "p1",
        "body": "hello",
        "files": [File(hash=FILE_HASH, name="cat.png", size=12)],
        "recipient": "bob",
        "visibility": "private",
        "created_at": datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC),
        "order_index": 7,
    }
    fields.update(overrides)
    return Post(**fields)


def test_post_container_embeds_file_metadata() -> None:
    data = json.loads(codec.to_json(codec.post_to_container(_post())))
    post = data["post"]
    assert post["id"] == "p1"
    assert post["files"] == [{"hash": FILE_HASH, "name": "cat.png", "size": 12}]
    assert post["sender"] == "alice"
    assert post["recipient"] == "bob"
    assert post["visibility"] == "private"
    assert post["user_id"] == "alice"
    assert post["created_at"].startswith("2026-01-02T03:04:05")


def test_post_round_trip_preserves_content() -> None:
    original = _post()
    payload = codec.decode_post(original.json())
    decoded = Post.from_payload(None, "alice", payload)  # type: ignore[arg-type]

    assert decoded.body == original.body
    assert decoded.files == original.files
    assert decoded.sender == original.sender
    assert decoded.recipient == original.recipient
    assert decoded.visibility == original.visibility
    assert decoded.created_at is None
    assert decoded.order_index is None


def test_collection_container_carries_page_metadata() -> None:
    page = _post().collection().limit(5)
    data = json.loads(page.json())
    assert [post["id"] for post in data["posts"]] == ["p1"]
    assert data["meta"] == {"count": 1, "before": None, "limit": 5}


def test_user_container_shape() -> None:
    user = User(id="alice", name="Alice", avatar=None, is_my_user=True)
    data = json.loads(user.json())
    assert data["user"]["id"] == "alice"
    assert data["user"]["name"] == "Alice"
    assert data["user"]["is_my_user"] is True


def test_decode_user_ignores_store_owned_fields() -> None:
    payload = codec.decode_user(json.dumps({"user": {"name": "Eve", "is_my_user": True}}))
    assert payload.name == "Eve"
    assert payload.id is None


def test_decode_post_applies_defaults() -> None:
    payload = codec.decode_post(json.dumps({"post": {"body": "hi"}}))
    assert payload.files == []
    assert payload.recipient == "none"
    assert payload.visibility == "public"
    assert payload.sender is None


@pytest.mark.parametrize(
    "body",
    [
        "{",
        "[]",
        json.dumps({"body": "no envelope"}),
        json.dumps({"post": {}}),
        json.dumps({"post": {"body": ""}}),
        json.dumps({"post": {"body": 5}}),
        json.dumps({"post": {"body": "x", "visibility": "secret"}}),
        json.dumps({"post": {"body": "x", "files": [{"hash": "nothex", "name": "a"}]}}),
        json.dumps({"post": {"body": "x", "files": [{"hash": FILE_HASH}]}}),
        json.dumps({"post": {"body": "x", "files": [{"hash": FILE_HASH, "name": "a", "size": "12"}]}}),
        json.dumps({"post": {"body": "x", "files": {"hash": FILE_HASH, "name": "a"}}}),
    ],
)
def test_decode_post_rejects_malformed_input(body: str) -> None:
    with pytest.raises(ValidationError):
        codec.decode_post(body)


def test_decode_rejects_non_text_input() -> None:
    with pytest.raises(ValidationError):
        codec.decode_post({"post": {"body": "x"}})  # type: ignore[arg-type]


def test_decode_allows_file_only_post() -> None:
    payload = codec.decode_post(
        json.dumps({"post": {"body": "", "files": [{"hash": FILE_HASH, "name": "a.txt"}]}})
    )
    assert payload.files[0].size is None
