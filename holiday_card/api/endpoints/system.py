"""
System endpoints: health check and the front-end page.
"""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse

from ...models import HealthResponse

STATIC_DIR = Path(__file__).resolve().parents[2] / "static"
INDEX_PAGE = STATIC_DIR / "index.html"

router = APIRouter(tags=["system"])


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Liveness probe."""
    return HealthResponse(status="healthy")


@router.get("/", include_in_schema=False)
async def index():
    """Serve the upload page."""
    return FileResponse(INDEX_PAGE, media_type="text/html")
