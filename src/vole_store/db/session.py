"""Database session configuration for the store index."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from vole_store.core.errors import ConflictError, StoreIOError


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import vole_store.models  # noqa: E402,F401


def create_store_engine(url: str, *, busy_timeout: float = 30.0, echo: bool = False) -> Engine:
    """Create an engine for the SQLite index.

    Connections are shared across request threads, run in WAL mode so readers
    never block on a writer, and enforce foreign keys.
    """
    engine = create_engine(
        url,
        connect_args={"check_same_thread": False, "timeout": busy_timeout},
        echo=echo,
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragmas(dbapi_connection: Any, _record: Any) -> None:  # pragma: no cover - driver hook
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute("PRAGMA synchronous=NORMAL")
        finally:
            cursor.close()

    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Return a session factory bound to ``engine``."""
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Iterator[Session]:
    """Yield a session wrapped in a single transaction.

    Commits on success and rolls back on failure. SQLAlchemy errors are
    translated into store errors so callers only see the store taxonomy.
    """
    session = factory()
    try:
        yield session
        session.commit()
    except IntegrityError as err:
        session.rollback()
        raise ConflictError(f"Index constraint violated: {err.orig}") from err
    except SQLAlchemyError as err:
        session.rollback()
        raise StoreIOError(f"Index operation failed: {err}") from err
    except BaseException:
        session.rollback()
        raise
    finally:
        session.close()


def create_tables(engine: Engine) -> None:
    """Create all index tables."""
    Base.metadata.create_all(bind=engine)
