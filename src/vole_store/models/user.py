# src/vole_store/models/user.py
"""SQLAlchemy models for known user identities."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from vole_store.db.session import Base
from vole_store.db.time import utcnow

MY_USER_SLOT = 1


class UserRecord(Base):
    """Persisted identity of a local or remote user."""

    __tablename__ = "user"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    avatar: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class MyUserMarker(Base):
    """Single-row table naming the local operator.

    The row is keyed by a constant slot so that pointing it at another user is
    one UPDATE and readers never see two operators or a gap between them.
    """

    __tablename__ = "my_user"

    slot: Mapped[int] = mapped_column(Integer, primary_key=True, default=MY_USER_SLOT)
    user_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("user.id", ondelete="CASCADE"),
        nullable=False,
    )
