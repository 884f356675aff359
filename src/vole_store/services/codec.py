"""Container codec: store entities to and from their external JSON shape.

Functions here are pure. They read attributes of users, posts, and files and
build pydantic containers, or validate incoming JSON into payload models. The
store decides what to do with a decoded payload.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from vole_store.core.errors import ValidationError
from vole_store.schemas.common import CollectionMeta
from vole_store.schemas.file import FileContainer
from vole_store.schemas.post import PostCollectionContainer, PostContainer, PostPayload
from vole_store.schemas.user import UserCollectionContainer, UserContainer, UserPayload

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from vole_store.store.post import File, Post
    from vole_store.store.user import User

__all__ = [
    "decode_post",
    "decode_user",
    "file_to_container",
    "post_to_container",
    "post_to_payload",
    "posts_to_container",
    "to_json",
    "user_to_container",
    "user_to_payload",
    "users_to_container",
]

ModelT = TypeVar("ModelT", bound=BaseModel)


def _problems(err: PydanticValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}"
        for error in err.errors()
    )


def _build(model: type[ModelT], **fields: object) -> ModelT:
    try:
        return model(**fields)
    except PydanticValidationError as err:
        raise ValidationError(f"Invalid {model.__name__}: {_problems(err)}") from err


def file_to_container(file: File) -> FileContainer:
    """Return the inline wire shape of a file reference."""
    return _build(FileContainer, hash=file.hash, name=file.name, size=file.size)


def user_to_payload(user: User) -> UserPayload:
    """Return the wire shape of ``user``."""
    return _build(
        UserPayload,
        id=user.id,
        name=user.name,
        avatar=user.avatar,
        is_my_user=user.is_my_user,
        created_at=user.created_at,
    )


def user_to_container(user: User) -> UserContainer:
    """Wrap ``user`` as ``{"user": {...}}``."""
    return _build(UserContainer, user=user_to_payload(user))


def users_to_container(users: Iterable[User]) -> UserCollectionContainer:
    """Wrap users as ``{"users": [...]}`` preserving order."""
    return _build(UserCollectionContainer, users=[user_to_payload(user) for user in users])


def post_to_payload(post: Post) -> PostPayload:
    """Return the wire shape of ``post`` with file metadata inline."""
    return _build(
        PostPayload,
        id=post.id,
        body=post.body,
        files=[file_to_container(file) for file in post.files],
        sender=post.sender,
        recipient=post.recipient,
        visibility=post.visibility,
        created_at=post.created_at,
        user_id=post.owner_id,
    )


def post_to_container(post: Post) -> PostContainer:
    """Wrap ``post`` as ``{"post": {...}}``."""
    return _build(PostContainer, post=post_to_payload(post))


def posts_to_container(
    posts: Iterable[Post],
    *,
    before: str | None = None,
    limit: int | None = None,
) -> PostCollectionContainer:
    """Wrap a page of posts with its pagination metadata."""
    payloads = [post_to_payload(post) for post in posts]
    meta = _build(CollectionMeta, count=len(payloads), before=before, limit=limit)
    return _build(PostCollectionContainer, posts=payloads, meta=meta)


def to_json(container: BaseModel) -> str:
    """Serialize a container to its JSON text."""
    return container.model_dump_json()


def _decode(model: type[ModelT], data: bytes | str) -> ModelT:
    if not isinstance(data, (bytes, bytearray, str)):
        raise ValidationError(f"Expected JSON text, got {type(data).__name__}")
    try:
        return model.model_validate_json(data)
    except PydanticValidationError as err:
        raise ValidationError(f"Invalid {model.__name__}: {_problems(err)}") from err


def decode_user(data: bytes | str) -> UserPayload:
    """Validate a ``{"user": {...}}`` container and return its payload.

    Raises:
        ValidationError: If the JSON is malformed or a required field is missing.
    """
    return _decode(UserContainer, data).user


def decode_post(data: bytes | str) -> PostPayload:
    """Validate a ``{"post": {...}}`` container and return its payload.

    Raises:
        ValidationError: If the JSON is malformed or a required field is missing.
    """
    return _decode(PostContainer, data).post
