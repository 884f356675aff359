"""Application settings and configuration.

This module defines all configuration options for the Vole store.
Settings are loaded from environment variables with sensible defaults.
"""

import hashlib
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_storage_root() -> Path:
    return Path.home() / "Vole"


class Settings(BaseSettings):
    """Store settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Vole", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")

    # Storage layout
    storage_root: Path = Field(default_factory=_default_storage_root, alias="VOLE_STORAGE_ROOT")
    store_version: str = Field(default="v1", alias="VOLE_STORE_VERSION")
    staging_dir: Path | None = Field(default=None, alias="VOLE_STAGING_DIR")

    # Content addressing
    hash_algorithm: str = Field(default="sha256", alias="VOLE_HASH_ALGORITHM")
    max_upload_bytes: int = Field(default=10 * 1024 * 1024, ge=1, alias="VOLE_MAX_UPLOAD_BYTES")

    # Index database
    sql_debug: bool = Field(default=False, alias="VOLE_SQL_DEBUG")
    sqlite_busy_timeout: float = Field(default=30.0, ge=0, alias="VOLE_SQLITE_BUSY_TIMEOUT")

    # Feed rendering
    page_size: int = Field(default=20, ge=1, alias="VOLE_PAGE_SIZE")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        populate_by_name=True,
        extra="ignore",
    )

    @field_validator("hash_algorithm")
    @classmethod
    def validate_hash_algorithm(cls, v: str) -> str:
        """Ensure the configured digest is one hashlib can build."""
        name = v.lower()
        if name not in hashlib.algorithms_available:
            raise ValueError(f"Unsupported hash algorithm: {v}")
        if name.startswith("shake_"):
            raise ValueError("Variable-length digests cannot address content")
        return name

    @field_validator("store_version")
    @classmethod
    def validate_store_version(cls, v: str) -> str:
        """Keep the version tag usable as a single directory name."""
        if not v or "/" in v or v in {".", ".."}:
            raise ValueError("Store version must be a plain directory name")
        return v

    @property
    def store_dir(self) -> Path:
        """Return the versioned root directory of the store."""
        return self.storage_root.expanduser() / self.store_version

    @property
    def users_dir(self) -> Path:
        """Return the directory holding one subdirectory per known user."""
        return self.store_dir / "users"

    @property
    def staging_path(self) -> Path:
        """Return the staging area for uploaded, not yet committed blobs.

        Defaults to a directory inside the store so that commits stay on a
        single filesystem and can be performed with hard links.
        """
        if self.staging_dir is not None:
            return self.staging_dir.expanduser()
        return self.store_dir / "staging"

    @property
    def database_path(self) -> Path:
        """Return the path of the SQLite index file."""
        return self.store_dir / "index.db"

    @property
    def database_url(self) -> str:
        """Return the SQLAlchemy URL of the index database."""
        return f"sqlite:///{self.database_path}"


settings = Settings()
