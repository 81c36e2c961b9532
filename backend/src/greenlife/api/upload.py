"""Media upload endpoint."""

import logging
from pathlib import PurePath
from typing import Annotated

from fastapi import APIRouter, File, HTTPException, UploadFile, status
from pydantic import BaseModel

from greenlife.api.deps import AdminIdentity
from greenlife.services.storage import storage

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_UPLOAD_SIZE = 5 * 1024 * 1024  # 5MB

ALLOWED_TYPES = {
    "image/jpeg": ("images", "jpg"),
    "image/png": ("images", "png"),
    "image/gif": ("images", "gif"),
    "image/webp": ("images", "webp"),
    "application/pdf": ("documents", "pdf"),
}


class UploadResponse(BaseModel):
    """Response from file upload."""

    url: str
    filename: str
    size: int
    mime_type: str


def get_extension(content_type: str) -> str:
    """Extension for a checked content type; the client's filename is never trusted."""
    return ALLOWED_TYPES[content_type][1]


@router.post("", response_model=UploadResponse)
async def upload_file(identity: AdminIdentity, file: Annotated[UploadFile, File()]):
    """Upload an image or PDF (admin only, 5MB max)."""
    content_type = file.content_type or ""
    if content_type not in ALLOWED_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid file type. Only JPEG, WEBP, PNG, GIF and PDF are allowed",
        )

    content = await file.read()
    if len(content) > MAX_UPLOAD_SIZE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File size exceeds 5MB limit",
        )

    prefix = ALLOWED_TYPES[content_type][0]
    extension = get_extension(content_type)
    url, key = await storage.upload_file(data=content, prefix=prefix, extension=extension)

    logger.info(f"Stored upload {key} ({len(content)} bytes) for {identity.id}")

    return UploadResponse(
        url=url,
        filename=PurePath(key).name,
        size=len(content),
        mime_type=content_type,
    )
