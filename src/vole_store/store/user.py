"""Known users and the posts they own."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from vole_store.core.errors import NotFoundError, StoreIOError
from vole_store.db.session import session_scope
from vole_store.db.time import as_utc
from vole_store.models.user import UserRecord
from vole_store.repositories.post_repo import PostRepository
from vole_store.repositories.user_repo import UserRepository
from vole_store.schemas.user import UserContainer
from vole_store.services import codec
from vole_store.store.collection import PostCollection, UserCollection
from vole_store.store.post import Post

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from vole_store.store.registry import UserStore

# Configure logger for this module
logger = logging.getLogger(__name__)


@dataclass(eq=False)
class User:
    """A known identity with its own post collection and file directory.

    ``is_my_user`` reflects the operator marker at the time the user was
    loaded or promoted; ask the store again for a fresh answer.
    """

    id: str
    name: str
    avatar: str | None = None
    created_at: datetime | None = None
    is_my_user: bool = False
    store: UserStore | None = field(default=None, repr=False)

    @classmethod
    def from_record(cls, store: UserStore, record: UserRecord, *, is_my_user: bool = False) -> User:
        """Build a user from its index row."""
        return cls(
            id=record.id,
            name=record.name,
            avatar=record.avatar,
            created_at=as_utc(record.created_at),
            is_my_user=is_my_user,
            store=store,
        )

    @property
    def home_dir(self) -> Path:
        """Return the user's directory inside the store."""
        return self._attached_store().home_dir(self.id)

    @property
    def file_dir(self) -> Path:
        """Return the directory holding the user's committed files."""
        return self._attached_store().file_dir(self.id)

    def file_path(self, file_hash: str) -> Path:
        """Return the path of a committed file.

        Raises:
            NotFoundError: If the user holds no file with that hash.
        """
        path = self._attached_store().content.blob_path(file_hash, self.file_dir)
        if not path.is_file():
            raise NotFoundError(f"User {self.id} has no file {file_hash}")
        return path

    def save(self) -> User:
        """Create or update the user record and its directories.

        Raises:
            ValidationError: If a field breaks the user container constraints.
        """
        store = self._attached_store()
        codec.user_to_payload(self)
        try:
            store.file_dir(self.id).mkdir(parents=True, exist_ok=True)
        except OSError as err:
            raise StoreIOError(f"Cannot create directories for user {self.id}: {err}") from err

        with store.registry_lock, session_scope(store.session_factory) as session:
            record = UserRepository(session).upsert(
                user_id=self.id,
                name=self.name,
                avatar=self.avatar,
            )
            created_at = as_utc(record.created_at)

        self.created_at = created_at
        logger.info("Saved user %s", self.id)
        return self

    def get_posts(self) -> PostCollection:
        """Return this user's posts, newest first.

        A user without posts gets an empty collection; storage failures raise.
        """
        store = self._attached_store()
        with session_scope(store.session_factory) as session:
            records = PostRepository(session).list_for_owner(self.id)
            posts = [Post.from_record(store, record) for record in records]
        return PostCollection(posts)

    def get_post(self, post_id: str) -> Post:
        """Return one of this user's posts.

        Raises:
            NotFoundError: If the user has no post with ``post_id``.
        """
        store = self._attached_store()
        with session_scope(store.session_factory) as session:
            record = PostRepository(session).get_by_id(self.id, post_id)
            if record is None:
                raise NotFoundError(f"User {self.id} has no post {post_id}")
            return Post.from_record(store, record)

    def delete_post(self, post_id: str) -> bool:
        """Delete one of this user's posts by id. Unknown ids are a no-op."""
        return Post(owner_id=self.id, id=post_id, body="", store=self._attached_store()).delete()

    def new_post_from_container_json(self, data: bytes | str) -> Post:
        """Return an unsaved post owned by this user from a ``{"post": ...}`` container.

        Raises:
            ValidationError: If the payload is malformed or incomplete.
        """
        payload = codec.decode_post(data)
        return Post.from_payload(self._attached_store(), self.id, payload)

    def collection(self) -> UserCollection:
        """Return a collection holding just this user."""
        return UserCollection((self,))

    def container(self) -> UserContainer:
        """Return the wire envelope for this user."""
        return codec.user_to_container(self)

    def json(self) -> str:
        """Return this user as JSON text."""
        return codec.to_json(self.container())

    def _attached_store(self) -> UserStore:
        if self.store is None:
            raise NotFoundError(f"User {self.id} is not attached to a store")
        return self.store
