"""File reference schemas."""

from pydantic import BaseModel, ConfigDict, Field

HASH_PATTERN = r"^[0-9a-f]{32,128}$"


class FileContainer(BaseModel):
    """File metadata embedded inline in a post."""

    hash: str = Field(..., pattern=HASH_PATTERN, description="Hex content digest")
    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    size: int | None = Field(None, ge=0, description="Size in bytes, resolved on save")

    model_config = ConfigDict(strict=True, extra="ignore")
