"""Create the on-disk layout and index tables of the store."""

import logging

from vole_store.core.settings import settings
from vole_store.store.registry import UserStore


def init_store() -> None:
    """Initialize the store configured by the environment."""
    with UserStore(settings) as store:
        print(f"Store initialized at {store.settings.store_dir}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_store()
