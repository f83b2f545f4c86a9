"""FastAPI application factory.

API layer:
- Validates inputs, reads/writes DB through services
- Renders AppError subclasses as ``{"message", "error"}`` JSON
- Forbidden: direct yt-dlp calls, raw SQL
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Generator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from videoshelf.config import Settings, get_settings
from videoshelf.core.errors import AppError
from videoshelf.db.repo import DbSession
from videoshelf.db.session import get_session, init_db
from videoshelf.extractor.base import ExtractorBase

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    """Dependency to get the settings the app was created with."""
    return request.app.state.settings


def get_extractor(request: Request) -> ExtractorBase:
    """Dependency to get the app's video extractor."""
    return request.app.state.extractor


def get_db_session(request: Request) -> Generator[DbSession, None, None]:
    """Dependency to get database session.

    Yields:
        Database session that is automatically closed after request.
    """
    session = get_session(request.app.state.settings.database_url)
    try:
        yield session
    finally:
        session.close()


async def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed bodies are client errors like any other missing input
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request body!", "error": str(exc.errors())},
    )


def _normalize_base_path(base_path: str) -> str:
    base_path = base_path.strip().rstrip("/")
    if base_path and not base_path.startswith("/"):
        base_path = "/" + base_path
    return base_path


def create_app(settings: Settings | None = None, extractor: ExtractorBase | None = None) -> FastAPI:
    """Create FastAPI application.

    Args:
        settings: Runtime settings. Defaults to values from the environment.
        extractor: Video extractor. Defaults to the yt-dlp extractor for
            ``settings.extractor_platform``.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = get_settings()

    if extractor is None:
        from videoshelf.extractor.ytdlp import YtDlpExtractor

        extractor = YtDlpExtractor(platform=settings.extractor_platform)

    if not settings.jwt_secret_key:
        logger.warning("JWT secret not configured; bearer-protected routes will fail")

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        init_db(settings.database_url)
        logger.info("Database initialized")
        yield

    app = FastAPI(
        title="videoshelf API",
        description="Video metadata registry with download passthrough",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.extractor = extractor

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )

    app.add_exception_handler(AppError, _app_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)

    # Include routes
    from videoshelf.api.routes import downloads, videos

    prefix = _normalize_base_path(settings.base_path)
    app.include_router(videos.router, prefix=prefix)
    app.include_router(downloads.router, prefix=prefix)

    @app.get(prefix + "/")
    def welcome():
        """Base path greeting."""
        return {"message": "welcome main route!"}

    # Health check endpoint
    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    return app
