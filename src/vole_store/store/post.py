"""Posts owned by a user, and the files they reference."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import TYPE_CHECKING

from vole_store.core.errors import ConflictError, NotFoundError, StoreIOError
from vole_store.db.session import session_scope
from vole_store.db.time import as_utc, utcnow
from vole_store.models.post import PostRecord
from vole_store.repositories.post_repo import PostRepository
from vole_store.repositories.user_repo import UserRepository
from vole_store.schemas.post import PostContainer, PostPayload
from vole_store.services import codec
from vole_store.services.order_index import next_order_index
from vole_store.store.collection import PostCollection
from vole_store.utils.ids import new_identifier

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from vole_store.store.registry import UserStore

# Configure logger for this module
logger = logging.getLogger(__name__)

NO_RECIPIENT = "none"


@dataclass(frozen=True)
class File:
    """A file reference. Identity is the content hash."""

    hash: str
    name: str
    size: int | None = None


@dataclass(eq=False)
class Post:
    """A post in its owner's collection.

    A post built from a container is unsaved until ``save()`` assigns its
    order and writes it to the owner's index.
    """

    owner_id: str
    body: str
    id: str | None = None
    files: list[File] = field(default_factory=list)
    sender: str | None = None
    recipient: str = NO_RECIPIENT
    visibility: str = "public"
    created_at: datetime | None = None
    order_index: int | None = None
    store: UserStore | None = field(default=None, repr=False)
    persisted: bool = field(default=False, repr=False)

    def __post_init__(self) -> None:
        if self.sender is None:
            self.sender = self.owner_id

    @classmethod
    def from_payload(cls, store: UserStore, owner_id: str, payload: PostPayload) -> Post:
        """Build an unsaved post for ``owner_id`` from a decoded container."""
        return cls(
            owner_id=owner_id,
            id=payload.id,
            body=payload.body,
            files=[File(hash=item.hash, name=item.name, size=item.size) for item in payload.files],
            sender=payload.sender,
            recipient=payload.recipient,
            visibility=payload.visibility,
            store=store,
        )

    @classmethod
    def from_record(cls, store: UserStore, record: PostRecord) -> Post:
        """Build a post from its index row."""
        return cls(
            owner_id=record.owner_id,
            id=record.id,
            body=record.body,
            files=[File(hash=row.hash, name=row.name, size=row.size) for row in record.files],
            sender=record.sender,
            recipient=record.recipient,
            visibility=record.visibility,
            created_at=as_utc(record.created_at),
            order_index=record.order_index,
            store=store,
            persisted=True,
        )

    @classmethod
    def welcome(cls, body: str) -> Post:
        """Return a detached placeholder post for an empty feed."""
        return cls(
            owner_id=NO_RECIPIENT,
            id=NO_RECIPIENT,
            body=body,
            sender=NO_RECIPIENT,
            created_at=utcnow(),
        )

    def save(self) -> Post:
        """Persist the post and commit the files it references.

        Files are committed into the owner's file directory before the index
        is written, so a post is never visible while pointing at a blob that
        is not in place. A failed commit aborts the save with nothing written.

        Raises:
            ValidationError: If a field breaks the post container constraints.
            NotFoundError: If the owner is unknown or a file was never staged.
            ConflictError: If an unsaved post reuses an id the owner already has.
            StoreIOError: If committing a file or writing the index fails.
        """
        store = self._attached_store()
        if self.id is None:
            self.id = new_identifier()
        codec.post_to_payload(self)

        with store.owner_locks.hold(self.owner_id), session_scope(store.session_factory) as session:
            if UserRepository(session).get_by_id(self.owner_id) is None:
                raise NotFoundError(f"User {self.owner_id} must be saved before posting")
            repo = PostRepository(session)
            existing = repo.get_by_id(self.owner_id, self.id)
            if existing is not None and not self.persisted:
                raise ConflictError(f"Post {self.id} already exists for user {self.owner_id}")

            files = self._commit_files(store)
            file_rows = [(item.hash, item.name, item.size or 0) for item in files]

            if existing is None:
                record = repo.create(
                    owner_id=self.owner_id,
                    post_id=self.id,
                    order_index=next_order_index(repo, self.owner_id),
                    body=self.body,
                    sender=self.sender or self.owner_id,
                    recipient=self.recipient,
                    visibility=self.visibility,
                    created_at=utcnow(),
                    files=file_rows,
                )
            else:
                record = repo.update(
                    existing,
                    body=self.body,
                    sender=self.sender or self.owner_id,
                    recipient=self.recipient,
                    visibility=self.visibility,
                    files=file_rows,
                )
            order_index = record.order_index
            created_at = as_utc(record.created_at)

        self.files = files
        self.order_index = order_index
        self.created_at = created_at
        self.persisted = True
        logger.info(
            "Saved post %s for user %s (order %d, %d files)",
            self.id,
            self.owner_id,
            order_index,
            len(files),
        )
        return self

    def delete(self) -> bool:
        """Remove the post from its owner's collection.

        Deleting a post that is not in the index succeeds and changes nothing.
        Committed files stay in the owner's file directory.

        Returns:
            True if a post was removed.
        """
        store = self._attached_store()
        if self.id is None:
            return False
        with store.owner_locks.hold(self.owner_id), session_scope(store.session_factory) as session:
            removed = PostRepository(session).delete(self.owner_id, self.id)
        self.persisted = False
        if removed:
            logger.info("Deleted post %s for user %s", self.id, self.owner_id)
        else:
            logger.debug("Post %s not found for user %s; nothing to delete", self.id, self.owner_id)
        return removed

    def collection(self) -> PostCollection:
        """Return a collection holding just this post."""
        return PostCollection((self,))

    def container(self) -> PostContainer:
        """Return the wire envelope for this post."""
        return codec.post_to_container(self)

    def json(self) -> str:
        """Return this post as JSON text."""
        return codec.to_json(self.container())

    def _attached_store(self) -> UserStore:
        if self.store is None:
            raise ConflictError(f"Post {self.id} is not attached to a store")
        return self.store

    def _commit_files(self, store: UserStore) -> list[File]:
        file_dir = store.file_dir(self.owner_id)
        committed: list[File] = []
        for item in self.files:
            path = store.content.commit(
                item.hash,
                file_dir,
                committed_copies=store.committed_copies(item.hash),
            )
            try:
                size = path.stat().st_size
            except OSError as err:
                raise StoreIOError(f"Cannot stat committed blob {item.hash}: {err}") from err
            committed.append(replace(item, size=size))
        return committed
