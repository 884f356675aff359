"""Shared Pydantic schemas for common container elements."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# Identifiers double as directory names, so keep them to a filesystem-safe alphabet.
IDENTIFIER_PATTERN = r"^[A-Za-z0-9_-]{1,64}$"


class CollectionMeta(BaseModel):
    """Pagination metadata attached to collection responses."""

    count: int = Field(..., ge=0, description="Number of items in this page.")
    before: str | None = Field(None, description="Exclusive cursor the page was taken before.")
    limit: int | None = Field(None, description="Page size cap applied, if any.")

    model_config = ConfigDict(strict=True, extra="ignore")
