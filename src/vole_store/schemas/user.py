"""User container schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .common import IDENTIFIER_PATTERN


class UserPayload(BaseModel):
    """Wire shape of a single user.

    ``is_my_user`` and ``created_at`` are owned by the store; they are emitted
    on output and ignored when a payload is turned into a user.
    """

    id: str | None = Field(None, pattern=IDENTIFIER_PATTERN, description="User identifier")
    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    avatar: str | None = Field(None, max_length=2048, description="Avatar reference")
    is_my_user: bool = Field(False, description="True for the local operator")
    created_at: datetime | None = None

    model_config = ConfigDict(strict=True, extra="ignore")


class UserContainer(BaseModel):
    """Envelope for a single user: ``{"user": {...}}``."""

    user: UserPayload

    model_config = ConfigDict(strict=True, extra="ignore")


class UserCollectionContainer(BaseModel):
    """Envelope for a list of users: ``{"users": [...]}``."""

    users: list[UserPayload]

    model_config = ConfigDict(strict=True, extra="ignore")
