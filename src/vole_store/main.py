# src/vole_store/main.py
"""Main entry point for the Vole HTTP layer."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from vole_store.api.dependencies import get_store
from vole_store.api.v1 import files_router, posts_router, system_router, users_router
from vole_store.core.errors import (
    ConflictError,
    NotFoundError,
    PayloadTooLargeError,
    StoreError,
    StoreIOError,
    ValidationError,
)
from vole_store.core.settings import settings

# Configure logger for this module
logger = logging.getLogger(__name__)

# Store error kinds mapped to HTTP status codes
ERROR_STATUS: dict[type[StoreError], int] = {
    PayloadTooLargeError: 413,
    ValidationError: 422,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    StoreIOError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Initialize FastAPI app
app = FastAPI(
    title="Vole API",
    description="Local-first personal store for users, posts, and files",
    version=settings.app_version,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(posts_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(system_router, prefix="/api")
app.include_router(files_router)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    """Translate store failures into JSON error responses."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_type, code in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            status_code = code
            break
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.on_event("shutdown")
async def on_shutdown() -> None:
    if get_store.cache_info().currsize:
        get_store().close()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("vole_store.main:app", host="127.0.0.1", port=6789, reload=settings.debug)
