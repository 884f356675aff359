"""System endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from vole_store.api.dependencies import SettingsDep

router = APIRouter(tags=["system"])


@router.get("/config")
def get_public_config(config: SettingsDep) -> dict[str, object]:
    """Return the configuration the web client needs."""
    return {
        "app_name": config.app_name,
        "version": config.app_version,
        "ui": {"page_size": config.page_size},
        "max_upload_bytes": config.max_upload_bytes,
    }
