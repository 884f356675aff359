# src/vole_store/models/__init__.py
"""SQLAlchemy models for the store index."""

from .post import PostFileRecord, PostRecord
from .user import MY_USER_SLOT, MyUserMarker, UserRecord

__all__ = [
    "MY_USER_SLOT",
    "MyUserMarker",
    "PostFileRecord",
    "PostRecord",
    "UserRecord",
]
