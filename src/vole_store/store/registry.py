"""The user registry: the entry point of the store.

A ``UserStore`` owns everything with process-independent lifetime: the index
engine, the content store, the registry lock, and the per-owner locks. The
"my user" marker lives in the index and is only reached through this class.

Example:
    from vole_store import UserStore

    store = UserStore()
    user = store.new_user_from_container_json(b'{"user": {"name": "Aaron"}}').save()
    store.set_my_user(user)
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from pathlib import Path
from typing import BinaryIO

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from vole_store.core.errors import NotFoundError, StoreIOError, ValidationError
from vole_store.core.settings import Settings
from vole_store.core.settings import settings as default_settings
from vole_store.db.session import (
    create_session_factory,
    create_store_engine,
    create_tables,
    session_scope,
)
from vole_store.repositories.post_repo import PostRepository
from vole_store.repositories.user_repo import UserRepository
from vole_store.services import codec
from vole_store.services.content_store import ContentStore
from vole_store.services.locks import KeyedLocks
from vole_store.store.collection import PostCollection, UserCollection
from vole_store.store.post import Post
from vole_store.store.user import User
from vole_store.utils.hash import is_valid_hash
from vole_store.utils.ids import is_valid_identifier, new_identifier

# Configure logger for this module
logger = logging.getLogger(__name__)

FILES_DIRNAME = "files"


class UserStore:
    """Registry of known users, the local operator marker, and their posts."""

    def __init__(self, settings: Settings | None = None) -> None:
        """Open (and if needed create) the store described by ``settings``.

        Raises:
            StoreIOError: If the directory layout cannot be created.
        """
        self.settings = settings or default_settings
        self.registry_lock = threading.RLock()
        self.owner_locks = KeyedLocks()
        self.content = ContentStore(
            self.settings.staging_path,
            algorithm=self.settings.hash_algorithm,
        )

        try:
            self.settings.users_dir.mkdir(parents=True, exist_ok=True)
        except OSError as err:
            raise StoreIOError(f"Cannot create store at {self.settings.store_dir}: {err}") from err
        self.content.ensure_layout()

        self.engine: Engine = create_store_engine(
            self.settings.database_url,
            busy_timeout=self.settings.sqlite_busy_timeout,
            echo=self.settings.sql_debug,
        )
        create_tables(self.engine)
        self.session_factory: sessionmaker[Session] = create_session_factory(self.engine)
        logger.info("Opened store at %s", self.settings.store_dir)

    def __enter__(self) -> UserStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Release pooled index connections."""
        self.engine.dispose()

    # Layout

    def home_dir(self, user_id: str) -> Path:
        """Return the directory of ``user_id`` inside the store."""
        if not is_valid_identifier(user_id):
            raise ValidationError(f"Not a user identifier: {user_id!r}")
        return self.settings.users_dir / user_id

    def file_dir(self, user_id: str) -> Path:
        """Return the committed-file directory of ``user_id``."""
        return self.home_dir(user_id) / FILES_DIRNAME

    # Users

    def get_my_user(self) -> User:
        """Return the local operator.

        Raises:
            NotFoundError: If no user has been marked as mine yet.
        """
        with session_scope(self.session_factory) as session:
            record = UserRepository(session).get_my_user()
            if record is None:
                raise NotFoundError("No user has been set as my user")
            return User.from_record(self, record, is_my_user=True)

    def get_user_by_id(self, user_id: str) -> User:
        """Return a known user.

        Raises:
            NotFoundError: If no user has ``user_id``.
        """
        with session_scope(self.session_factory) as session:
            repo = UserRepository(session)
            record = repo.get_by_id(user_id)
            if record is None:
                raise NotFoundError(f"User {user_id} not found")
            return User.from_record(self, record, is_my_user=repo.get_my_user_id() == user_id)

    def get_users(self) -> UserCollection:
        """Return every known user, the operator included, in creation order."""
        with session_scope(self.session_factory) as session:
            repo = UserRepository(session)
            my_user_id = repo.get_my_user_id()
            users = [
                User.from_record(self, record, is_my_user=record.id == my_user_id)
                for record in repo.list_all()
            ]
        return UserCollection(users)

    def set_my_user(self, user: User) -> User:
        """Mark ``user`` as the local operator, superseding any previous one.

        The previous operator's record is left as it was.

        Raises:
            NotFoundError: If ``user`` has not been saved.
        """
        with self.registry_lock, session_scope(self.session_factory) as session:
            repo = UserRepository(session)
            if repo.get_by_id(user.id) is None:
                raise NotFoundError(f"User {user.id} must be saved before it can be my user")
            previous = repo.get_my_user_id()
            repo.set_my_user_id(user.id)

        user.is_my_user = True
        if previous not in (None, user.id):
            logger.info("My user changed from %s to %s", previous, user.id)
        else:
            logger.info("My user set to %s", user.id)
        return user

    def new_user_from_container_json(self, data: bytes | str) -> User:
        """Return an unsaved user from a ``{"user": {...}}`` container.

        Raises:
            ValidationError: If the payload is malformed or incomplete.
        """
        payload = codec.decode_user(data)
        return User(
            id=payload.id or new_identifier(),
            name=payload.name,
            avatar=payload.avatar,
            store=self,
        )

    # Posts and files

    def get_posts(self) -> PostCollection:
        """Return every user's posts as one feed, newest first."""
        with session_scope(self.session_factory) as session:
            posts = [Post.from_record(self, record) for record in PostRepository(session).list_all()]
        return PostCollection(posts)

    def stage_file(
        self,
        source: BinaryIO | bytes,
        *,
        expected_size: int | None = None,
        max_size: int | None = None,
    ) -> str:
        """Stage uploaded bytes and return their content hash."""
        return self.content.stage(source, expected_size=expected_size, max_size=max_size)

    def committed_copies(self, file_hash: str) -> Iterator[Path]:
        """Yield every user's committed copy of ``file_hash``."""
        if not is_valid_hash(file_hash):
            return
        yield from self.settings.users_dir.glob(f"*/{FILES_DIRNAME}/{file_hash}")
