"""Version 1 API endpoints."""

from .endpoints import files_router, posts_router, system_router, users_router

__all__ = [
    "files_router",
    "posts_router",
    "system_router",
    "users_router",
]
