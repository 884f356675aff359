# tests/conftest.py
from __future__ import annotations

import json
from collections.abc import Callable, Iterator
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from vole_store.api.dependencies import get_settings, get_store
from vole_store.core.settings import Settings
from vole_store.main import app as fastapi_app
from vole_store.store import Post, User, UserStore


def user_json(name: str, **fields: Any) -> str:
    """Return a ``{"user": {...}}`` container."""
    return json.dumps({"user": {"name": name, **fields}})


def post_json(body: str, **fields: Any) -> str:
    """Return a ``{"post": {...}}`` container."""
    return json.dumps({"post": {"body": body, **fields}})


@pytest.fixture()
def test_settings(tmp_path) -> Settings:
    """Settings pointing the store at a per-test directory."""
    return Settings(storage_root=tmp_path / "Vole", sqlite_busy_timeout=60.0)


@pytest.fixture()
def store(test_settings: Settings) -> Iterator[UserStore]:
    with UserStore(test_settings) as user_store:
        yield user_store


@pytest.fixture()
def make_user(store: UserStore) -> Callable[..., User]:
    """Return a factory that saves a user with the given id."""

    def _make(user_id: str, name: str | None = None, **fields: Any) -> User:
        payload = user_json(name or user_id.title(), id=user_id, **fields)
        return store.new_user_from_container_json(payload).save()

    return _make


@pytest.fixture()
def my_user(store: UserStore, make_user: Callable[..., User]) -> User:
    """Create a saved user and mark it as the local operator."""
    return store.set_my_user(make_user("alice", "Alice"))


@pytest.fixture()
def make_post() -> Callable[..., Post]:
    """Return a factory that saves a post for a user."""

    def _make(user: User, body: str, **fields: Any) -> Post:
        return user.new_post_from_container_json(post_json(body, **fields)).save()

    return _make


@pytest.fixture()
def app(store: UserStore, test_settings: Settings) -> Iterator[FastAPI]:
    fastapi_app.dependency_overrides[get_store] = lambda: store
    fastapi_app.dependency_overrides[get_settings] = lambda: test_settings
    try:
        yield fastapi_app
    finally:
        fastapi_app.dependency_overrides.pop(get_store, None)
        fastapi_app.dependency_overrides.pop(get_settings, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client
