"""Local-first personal store for users, posts, and file attachments."""

from vole_store.core.errors import (
    ConflictError,
    NotFoundError,
    PayloadTooLargeError,
    StoreError,
    StoreIOError,
    ValidationError,
)
from vole_store.services.content_store import ContentStore
from vole_store.store import (
    File,
    Post,
    PostCollection,
    User,
    UserCollection,
    UserStore,
)

__all__ = [
    "ConflictError",
    "ContentStore",
    "File",
    "NotFoundError",
    "PayloadTooLargeError",
    "Post",
    "PostCollection",
    "StoreError",
    "StoreIOError",
    "User",
    "UserCollection",
    "UserStore",
    "ValidationError",
]
