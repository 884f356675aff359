# src/vole_store/api/v1/endpoints/files.py
"""File upload endpoint."""

from fastapi import APIRouter, HTTPException, UploadFile
from fastapi import File as FormFile

from vole_store.api.dependencies import SettingsDep, StoreDep

router = APIRouter(prefix="/file", tags=["files"])


@router.post("/upload")
def upload_file(
    store: StoreDep,
    config: SettingsDep,
    file: UploadFile = FormFile(..., description="File to stage"),
) -> dict[str, str]:
    """Stage an uploaded file and return its content hash.

    The file is only committed to a user when a post referencing the hash is
    saved. Uploads of unknown size are cut off once they pass the limit.
    """
    if file.size is not None and file.size > config.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"Uploads are limited to {config.max_upload_bytes} bytes",
        )
    file.file.seek(0)
    file_hash = store.stage_file(
        file.file,
        expected_size=file.size,
        max_size=config.max_upload_bytes,
    )
    return {"hash": file_hash}
