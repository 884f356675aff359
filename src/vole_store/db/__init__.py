# src/vole_store/db/__init__.py
"""Database configuration and utilities."""

from .session import Base, create_session_factory, create_store_engine, session_scope

__all__ = ["Base", "create_session_factory", "create_store_engine", "session_scope"]
