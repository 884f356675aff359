# src/vole_store/schemas/__init__.py
"""
Pydantic containers: the external JSON shape of store entities.

These schemas are independent of the index tables so the wire format can
evolve without touching on-disk layout.
"""

from .common import IDENTIFIER_PATTERN, CollectionMeta
from .file import HASH_PATTERN, FileContainer
from .post import PostCollectionContainer, PostContainer, PostPayload, Visibility
from .user import UserCollectionContainer, UserContainer, UserPayload

__all__ = [
    "IDENTIFIER_PATTERN", "HASH_PATTERN",
    "CollectionMeta",
    "FileContainer",
    "PostPayload", "PostContainer", "PostCollectionContainer", "Visibility",
    "UserPayload", "UserContainer", "UserCollectionContainer",
]
