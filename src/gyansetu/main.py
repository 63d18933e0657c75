# src/gyansetu/main.py
"""Main entry point for the GyanSetu application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import FileResponse, JSONResponse

from gyansetu.api.v1 import (
    answers_router,
    auth_router,
    courses_router,
    moderation_router,
    notifications_router,
    questions_router,
    replies_router,
    reports_router,
    uploads_router,
    users_router,
    votes_router,
)
from gyansetu.core.exceptions import GyanSetuError, NotFoundError
from gyansetu.core.settings import settings
from gyansetu.schemas.common import ErrorResponse
from gyansetu.services.storage import BlobStoreError, get_blob_store

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="GyanSetu API",
    description="Course-scoped academic question and answer platform",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)


@app.exception_handler(GyanSetuError)
async def gyansetu_error_handler(_request: Request, exc: GyanSetuError) -> JSONResponse:
    """Render domain errors as ``{"error": message, "status": code}``."""
    if exc.status_code >= 500:
        logger.error("Request failed: %s", exc.message)
    else:
        logger.info("Request rejected (%s): %s", exc.status_code, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.message, status=exc.status_code).model_dump(),
    )


def _describe_validation_error(exc: RequestValidationError) -> str:
    """Turn the first pydantic error into a one-line message for the UI."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    if first.get("type") == "missing":
        return f"{field} is required" if field else "Request body is required"
    message = str(first.get("msg", "Invalid value")).removeprefix("Value error, ")
    return f"{field}: {message}" if field else message


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render malformed requests like every other validation failure."""
    message = _describe_validation_error(exc)
    logger.info("Request rejected (400): %s", message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(error=message, status=status.HTTP_400_BAD_REQUEST).model_dump(),
    )


# Include API routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(courses_router, prefix="/api/v1")
app.include_router(questions_router, prefix="/api/v1")
app.include_router(answers_router, prefix="/api/v1")
app.include_router(replies_router, prefix="/api/v1")
app.include_router(votes_router, prefix="/api/v1")
app.include_router(reports_router, prefix="/api/v1")
app.include_router(moderation_router, prefix="/api/v1")
app.include_router(notifications_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(uploads_router, prefix="/api/v1")


# Uploaded images are served by the app itself when the media URL is local;
# an absolute MEDIA_BASE_URL points at a CDN or reverse proxy instead.
if settings.media_base_url.startswith("/"):

    @app.get(f"{settings.media_base_url.rstrip('/')}/{{path:path}}", include_in_schema=False)
    async def serve_media(path: str) -> FileResponse:
        """Serve an uploaded image from the blob store."""
        try:
            target = get_blob_store().local_path(path)
        except BlobStoreError as exc:
            raise NotFoundError("Image not found") from exc
        if not target.is_file():
            raise NotFoundError("Image not found")
        return FileResponse(target)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "GyanSetu API",
        "version": settings.app_version,
        "description": "Course-scoped academic question and answer platform",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("gyansetu.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
