# src/vole_store/models/post.py
"""SQLAlchemy models for posts and their attached files."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    BigInteger,
    DateTime,
    ForeignKey,
    ForeignKeyConstraint,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vole_store.db.session import Base
from vole_store.db.time import utcnow


class PostRecord(Base):
    """A post in its owner's index.

    Posts are keyed by (owner_id, id); ids only need to be unique inside one
    owner's collection. ``order_index`` is a per-owner monotonic counter that
    defines newest-first ordering independent of clock resolution.
    """

    __tablename__ = "post"
    __table_args__ = (UniqueConstraint("owner_id", "order_index", name="uq_post_owner_order"),)

    owner_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("user.id", ondelete="CASCADE"),
        primary_key=True,
    )
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    order_index: Mapped[int] = mapped_column(BigInteger, nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    sender: Mapped[str] = mapped_column(String(64), nullable=False)
    recipient: Mapped[str] = mapped_column(String(64), nullable=False, default="none")
    visibility: Mapped[str] = mapped_column(String(16), nullable=False, default="public")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    files: Mapped[list[PostFileRecord]] = relationship(
        "PostFileRecord",
        cascade="all, delete-orphan",
        order_by="PostFileRecord.position",
        lazy="selectin",
    )


class PostFileRecord(Base):
    """Reference from a post to a committed blob in the owner's file directory."""

    __tablename__ = "post_file"
    __table_args__ = (
        ForeignKeyConstraint(
            ["owner_id", "post_id"],
            ["post.owner_id", "post.id"],
            ondelete="CASCADE",
        ),
    )

    owner_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    post_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, primary_key=True)
    hash: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    size: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
