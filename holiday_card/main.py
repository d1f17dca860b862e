from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.endpoints import cards, system
from .api.endpoints.system import STATIC_DIR
from .core.config import settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 Starting Holiday Card Generator")
    logger.info(f"🌐 Server configured to run on {settings.host}:{settings.port}")

    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    logger.info(f"📁 Upload staging directory: {settings.upload_dir}")

    if settings.style_transfer_enabled:
        logger.info("🎄 Style transfer enabled for christmas cards")
    else:
        logger.info("💡 Style transfer disabled (set HUGGINGFACE_API_TOKEN to enable)")

    yield
    logger.info("🛑 Shutdown complete")


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors as {"error": "<message>"}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}"
        for error in exc.errors()
    )
    return JSONResponse(status_code=422, content={"error": messages or "Invalid request"})


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        description=settings.description,
        version=settings.version,
        lifespan=lifespan,
    )

    cors_origins = settings.allowed_origins or ["*"]
    logger.info(f"🌐 CORS configured for origins: {cors_origins}")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.include_router(system.router)
    app.include_router(cards.router)
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    logger.info("✅ Routers registered:")
    logger.info("   - System: /health, /")
    logger.info("   - Cards: /api/generate-card")

    return app
