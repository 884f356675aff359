"""Shared API dependencies."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from vole_store.core.settings import Settings, settings
from vole_store.store.registry import UserStore

# Responses describe live store state and must not be cached by the browser.
NO_CACHE_HEADERS = {"Cache-Control": "no-cache, no-store"}


@lru_cache(maxsize=1)
def get_store() -> UserStore:
    """Return the process-wide store built from the environment."""
    return UserStore(settings)


def get_settings() -> Settings:
    """Return the active settings."""
    return settings


# Type aliases for dependency injection
StoreDep = Annotated[UserStore, Depends(get_store)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
