# mypy: ignore-errors
"""Tests for post and file endpoints."""

import io

import pytest
from fastapi import UploadFile, status

from vole_store.api.v1.endpoints.files import upload_file
from vole_store.core.errors import PayloadTooLargeError
from tests.conftest import post_json


def _upload(client, data: bytes, name: str = "note.txt") -> str:
    response = client.post("/file/upload", files={"file": (name, data, "text/plain")})
    assert response.status_code == status.HTTP_200_OK
    return response.json()["hash"]


def test_empty_feed_returns_welcome_post(client) -> None:
    response = client.get("/api/posts")
    assert response.status_code == status.HTTP_200_OK
    posts = response.json()["posts"]
    assert len(posts) == 1
    assert posts[0]["id"] == "none"
    assert posts[0]["body"].startswith("Welcome to Vole")


def test_my_user_feed_without_posts_is_empty(client, my_user) -> None:
    response = client.get("/api/posts", params={"user": "my_user"})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["posts"] == []


def test_posts_for_unknown_user_is_not_found(client) -> None:
    response = client.get("/api/posts", params={"user": "nobody"})
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_create_post_without_my_user_is_not_found(client) -> None:
    response = client.post("/api/posts", content=post_json("orphan"))
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_create_post_with_attachment(client, store, my_user) -> None:
    file_hash = _upload(client, b"attachment body")

    response = client.post(
        "/api/posts",
        content=post_json("look", files=[{"hash": file_hash, "name": "note.txt"}]),
    )
    assert response.status_code == status.HTTP_200_OK
    post = response.json()["post"]
    assert post["files"] == [{"hash": file_hash, "name": "note.txt", "size": 15}]
    assert post["user_id"] == "alice"
    assert my_user.file_path(file_hash).read_bytes() == b"attachment body"

    feed = client.get("/api/posts", params={"user": "alice"}).json()
    assert [item["id"] for item in feed["posts"]] == [post["id"]]


def test_upload_same_bytes_twice_returns_same_hash(client) -> None:
    assert _upload(client, b"dup") == _upload(client, b"dup", name="copy.txt")


def test_upload_over_limit_is_rejected(client, test_settings) -> None:
    test_settings.max_upload_bytes = 4
    response = client.post("/file/upload", files={"file": ("big.bin", b"0123456789", "application/octet-stream")})
    assert response.status_code == 413


def test_upload_of_unknown_size_is_cut_off_at_limit(store, test_settings) -> None:
    test_settings.max_upload_bytes = 4
    upload = UploadFile(io.BytesIO(b"0123456789"), filename="big.bin")
    assert upload.size is None

    with pytest.raises(PayloadTooLargeError):
        upload_file(store, test_settings, file=upload)
    assert list(store.content.staging_dir.iterdir()) == []


def test_feed_pages_with_before_cursor(client, my_user, make_post, test_settings) -> None:
    for n in range(1, 6):
        make_post(my_user, f"post {n}", id=f"p{n}")
    test_settings.page_size = 2

    first = client.get("/api/posts", params={"user": "my_user"}).json()
    assert [post["id"] for post in first["posts"]] == ["p5", "p4"]

    second = client.get("/api/posts", params={"user": "my_user", "before": "p3"}).json()
    assert [post["id"] for post in second["posts"]] == ["p2", "p1"]
    assert second["meta"] == {"count": 2, "before": "p3", "limit": 2}


def test_delete_post_is_idempotent(client, my_user, make_post) -> None:
    make_post(my_user, "bye", id="p1")

    for _ in range(2):
        response = client.delete("/api/posts/p1")
        assert response.status_code == status.HTTP_200_OK
        assert response.text == "OK"

    assert my_user.get_posts().is_empty


def test_create_post_rejects_missing_body(client, my_user) -> None:
    response = client.post("/api/posts", content=b'{"post": {"visibility": "public"}}')
    assert response.status_code == 422


def test_create_post_conflicting_id(client, my_user, make_post) -> None:
    make_post(my_user, "first", id="p1")
    response = client.post("/api/posts", content=post_json("second", id="p1"))
    assert response.status_code == status.HTTP_409_CONFLICT
