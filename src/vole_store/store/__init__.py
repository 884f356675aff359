"""Domain objects of the store: users, posts, files, and collections."""

from .collection import Collection, PostCollection, UserCollection
from .post import File, Post
from .registry import UserStore
from .user import User

__all__ = [
    "Collection",
    "File",
    "Post",
    "PostCollection",
    "User",
    "UserCollection",
    "UserStore",
]
