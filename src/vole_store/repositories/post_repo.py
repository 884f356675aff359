"""Data access helpers for working with posts."""
from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from vole_store.models.post import PostFileRecord, PostRecord

__all__ = ["PostRepository"]


class PostRepository:
    """Thin wrapper around index access for post entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, owner_id: str, post_id: str) -> PostRecord | None:
        """Return a post of ``owner_id`` by identifier."""
        return self.session.get(PostRecord, (owner_id, post_id))

    def list_for_owner(self, owner_id: str) -> list[PostRecord]:
        """Return the owner's posts sorted by descending order index."""
        result = self.session.execute(
            select(PostRecord)
            .where(PostRecord.owner_id == owner_id)
            .order_by(PostRecord.order_index.desc())
        )
        return list(result.scalars())

    def list_all(self) -> list[PostRecord]:
        """Return every post, newest first across owners."""
        result = self.session.execute(
            select(PostRecord).order_by(
                PostRecord.created_at.desc(),
                PostRecord.order_index.desc(),
                PostRecord.owner_id,
            )
        )
        return list(result.scalars())

    def max_order_index(self, owner_id: str) -> int:
        """Return the highest order index used by ``owner_id`` (0 if none)."""
        stmt = select(func.max(PostRecord.order_index)).where(PostRecord.owner_id == owner_id)
        return int(self.session.execute(stmt).scalar() or 0)

    def create(
        self,
        *,
        owner_id: str,
        post_id: str,
        order_index: int,
        body: str,
        sender: str,
        recipient: str,
        visibility: str,
        created_at: datetime,
        files: Sequence[tuple[str, str, int]],
    ) -> PostRecord:
        """Insert a new post and return the persisted ORM instance.

        Args:
            owner_id: Identifier of the owning user.
            post_id: Identifier unique within the owner's collection.
            order_index: Monotonic ordering index supplied by the caller.
            body: Post text.
            sender: Identifier of the sending user.
            recipient: Identifier of the recipient or ``"none"``.
            visibility: Visibility flag value.
            created_at: Creation timestamp.
            files: ``(hash, name, size)`` triples in display order.
        """
        record = PostRecord(
            owner_id=owner_id,
            id=post_id,
            order_index=order_index,
            body=body,
            sender=sender,
            recipient=recipient,
            visibility=visibility,
            created_at=created_at,
        )
        record.files = self._file_rows(owner_id, post_id, files)
        self.session.add(record)
        self.session.flush()
        return record

    def update(
        self,
        record: PostRecord,
        *,
        body: str,
        sender: str,
        recipient: str,
        visibility: str,
        files: Sequence[tuple[str, str, int]],
    ) -> PostRecord:
        """Overwrite the mutable fields of an existing post."""
        record.body = body
        record.sender = sender
        record.recipient = recipient
        record.visibility = visibility
        record.files.clear()
        self.session.flush()
        record.files.extend(self._file_rows(record.owner_id, record.id, files))
        self.session.flush()
        return record

    def delete(self, owner_id: str, post_id: str) -> bool:
        """Remove a post. Returns False if it did not exist."""
        self.session.execute(
            delete(PostFileRecord).where(
                PostFileRecord.owner_id == owner_id,
                PostFileRecord.post_id == post_id,
            )
        )
        result = self.session.execute(
            delete(PostRecord).where(
                PostRecord.owner_id == owner_id,
                PostRecord.id == post_id,
            )
        )
        return bool(result.rowcount)

    @staticmethod
    def _file_rows(
        owner_id: str,
        post_id: str,
        files: Sequence[tuple[str, str, int]],
    ) -> list[PostFileRecord]:
        return [
            PostFileRecord(
                owner_id=owner_id,
                post_id=post_id,
                position=position,
                hash=file_hash,
                name=name,
                size=size,
            )
            for position, (file_hash, name, size) in enumerate(files)
        ]
