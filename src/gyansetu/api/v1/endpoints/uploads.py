# src/gyansetu/api/v1/endpoints/uploads.py
"""Image upload endpoint for the GyanSetu API."""

import uuid

from fastapi import APIRouter, File, UploadFile, status

from gyansetu.core.exceptions import ValidationError
from gyansetu.core.settings import settings
from gyansetu.schemas.upload import UploadResponse
from gyansetu.services.storage import get_blob_store

from ..dependencies import CurrentUserDep

router = APIRouter(prefix="/uploads", tags=["uploads"])

ALLOWED_IMAGE_TYPES = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/gif": "gif",
    "image/webp": "webp",
}


@router.post("/images", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_image(
    current_user: CurrentUserDep,
    file: UploadFile = File(...),
) -> UploadResponse:
    """Store an image for a question, answer or reply and return its public URL."""
    extension = ALLOWED_IMAGE_TYPES.get(file.content_type or "")
    if extension is None:
        raise ValidationError("Only PNG, JPEG, GIF and WebP images can be uploaded")

    data = await file.read(settings.max_upload_bytes + 1)
    if not data:
        raise ValidationError("Uploaded file is empty")
    if len(data) > settings.max_upload_bytes:
        raise ValidationError(
            f"Image exceeds the {settings.max_upload_bytes // (1024 * 1024)} MB upload limit"
        )

    path = f"{current_user.id}/{uuid.uuid4().hex}.{extension}"
    url = get_blob_store().upload(path, data)
    return UploadResponse(url=url, path=path)
