"""
Holiday card generation endpoint.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from fastapi import APIRouter, File, Form, HTTPException, UploadFile
from fastapi.responses import Response
from starlette.datastructures import UploadFile as StarletteUploadFile

from ...core.config import settings
from ...models import DEFAULT_HOLIDAY_TYPE, HOLIDAY_TYPES, CardRequest, ErrorResponse
from ...services.card_compositor import CardComposer
from ...services.upload_staging import staged_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["cards"])
composer = CardComposer()


def _read_upload(image: UploadFile) -> bytes:
    """Read the upload, enforcing the configured size cap."""
    limit = settings.max_upload_bytes
    data = image.file.read(limit + 1)
    if len(data) > limit:
        raise HTTPException(
            status_code=413,
            detail=f"Image file too large (max {limit} bytes)",
        )
    return data


@router.post(
    "/generate-card",
    response_class=Response,
    responses={
        200: {"content": {"image/jpeg": {}}, "description": "The generated holiday card."},
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def generate_card(
    image: Optional[Union[UploadFile, str]] = File(None),
    holiday_type: str = Form(DEFAULT_HOLIDAY_TYPE),
):
    """
    Generate a holiday card from an uploaded photo.

    Uses sync def because Pillow compositing and the style transfer call are
    blocking; FastAPI runs the handler in its threadpool.
    """
    logger.info("📨 Received request to generate card")

    # a plain text field named "image" carries no file
    if not isinstance(image, StarletteUploadFile) or not image.filename:
        logger.info("No file in request")
        raise HTTPException(status_code=400, detail="No image file provided")

    request = CardRequest(holiday_type=holiday_type or DEFAULT_HOLIDAY_TYPE)
    if request.holiday_type not in HOLIDAY_TYPES:
        logger.info(f"Unknown holiday type '{request.holiday_type}', using generic greeting")

    data = _read_upload(image)
    if not data:
        raise HTTPException(status_code=400, detail="No image file provided")

    suffix = Path(image.filename).suffix.lower() or ".jpg"
    with staged_upload(data, settings.upload_dir, suffix=suffix) as image_path:
        logger.info(f"🎨 Processing image: {image_path.name}, holiday type: {request.holiday_type}")
        try:
            card_bytes = composer.compose_file(image_path, request.holiday_type)
        except Exception as e:
            logger.exception("❌ Error generating card")
            raise HTTPException(
                status_code=500,
                detail=str(e) or "Failed to generate holiday card",
            ) from e

    logger.info(f"✅ Card generated successfully, size: {len(card_bytes)} bytes")
    return Response(content=card_bytes, media_type="image/jpeg")
