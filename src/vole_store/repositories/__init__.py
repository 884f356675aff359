"""Data access helpers for the store index."""

from .post_repo import PostRepository
from .user_repo import UserRepository

__all__ = ["PostRepository", "UserRepository"]
