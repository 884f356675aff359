"""Data access helpers for known users and the my-user marker."""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from vole_store.models.user import MY_USER_SLOT, MyUserMarker, UserRecord

__all__ = ["UserRepository"]


class UserRepository:
    """Thin wrapper around index access for user entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, user_id: str) -> UserRecord | None:
        """Return a user by identifier."""
        return self.session.get(UserRecord, user_id)

    def list_all(self) -> list[UserRecord]:
        """Return all users in creation order (ties broken by id)."""
        result = self.session.execute(
            select(UserRecord).order_by(UserRecord.created_at, UserRecord.id)
        )
        return list(result.scalars())

    def upsert(self, *, user_id: str, name: str, avatar: str | None) -> UserRecord:
        """Create the user or update its profile fields."""
        record = self.get_by_id(user_id)
        if record is None:
            record = UserRecord(id=user_id, name=name, avatar=avatar)
            self.session.add(record)
        else:
            record.name = name
            record.avatar = avatar
        self.session.flush()
        return record

    def get_my_user(self) -> UserRecord | None:
        """Return the user currently marked as the local operator."""
        stmt = select(UserRecord).join(MyUserMarker, MyUserMarker.user_id == UserRecord.id).where(
            MyUserMarker.slot == MY_USER_SLOT
        )
        return self.session.execute(stmt).scalars().first()

    def get_my_user_id(self) -> str | None:
        """Return the identifier currently marked as the local operator."""
        marker = self.session.get(MyUserMarker, MY_USER_SLOT)
        return marker.user_id if marker is not None else None

    def set_my_user_id(self, user_id: str) -> None:
        """Point the operator marker at ``user_id``."""
        marker = self.session.get(MyUserMarker, MY_USER_SLOT)
        if marker is None:
            self.session.add(MyUserMarker(slot=MY_USER_SLOT, user_id=user_id))
        else:
            marker.user_id = user_id
        self.session.flush()
