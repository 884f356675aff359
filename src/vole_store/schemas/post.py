# src/vole_store/schemas/post.py
"""Post container schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .common import IDENTIFIER_PATTERN, CollectionMeta
from .file import FileContainer

Visibility = Literal["public", "private"]


class PostPayload(BaseModel):
    """Wire shape of a single post with its files resolved inline."""

    id: str | None = Field(None, pattern=IDENTIFIER_PATTERN, description="Post identifier")
    body: str = Field(..., max_length=10000, description="Post text")
    files: list[FileContainer] = Field(default_factory=list, description="Attached files in order")
    sender: str | None = Field(None, pattern=IDENTIFIER_PATTERN, description="Sending user id")
    recipient: str = Field("none", pattern=IDENTIFIER_PATTERN, description="Recipient id or 'none'")
    visibility: Visibility = "public"
    created_at: datetime | None = None
    user_id: str | None = Field(None, description="Owning user id (output only)")

    model_config = ConfigDict(strict=True, extra="ignore")

    @model_validator(mode="after")
    def _require_content(self) -> "PostPayload":
        if not self.body.strip() and not self.files:
            raise ValueError("A post needs a body or at least one file")
        return self


class PostContainer(BaseModel):
    """Envelope for a single post: ``{"post": {...}}``."""

    post: PostPayload

    model_config = ConfigDict(strict=True, extra="ignore")


class PostCollectionContainer(BaseModel):
    """Envelope for a page of posts with optional pagination metadata."""

    posts: list[PostPayload]
    meta: CollectionMeta | None = None

    model_config = ConfigDict(strict=True, extra="ignore")
