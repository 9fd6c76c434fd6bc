"""
Attendance & Task Backend - Main Application Entry Point
"""
import logging
from typing import Optional
from urllib.parse import urlparse, urlunparse

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.api.router import api_router
from app.core.config import Settings, load_settings
from app.core.constants import API_PREFIX, DEFAULT_VERSION
from app.core.errors import (
    app_error_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler,
)
from app.core.exceptions import AppError
from app.core.logging import setup_logging
from app.core.security import TokenService
from app.db.session import build_engine, build_session_factory, create_tables

logger = logging.getLogger(__name__)


def _mask_database_url(url: str) -> str:
    """Mask password in DATABASE_URL for safe logging; show full path for sqlite."""
    try:
        parsed = urlparse(url)
        if parsed.scheme.startswith("sqlite"):
            return url  # Safe to log path
        if parsed.password:
            netloc = f"{parsed.username}:****@{parsed.hostname or ''}"
            if parsed.port:
                netloc += f":{parsed.port}"
            return urlunparse(parsed._replace(netloc=netloc))
    except ValueError:
        return "***"
    return url


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application from an explicit Settings object.

    The engine, session factory and token service are created here and kept
    on app.state; request dependencies read them from there.
    """
    settings = settings or load_settings()
    setup_logging(settings)

    app = FastAPI(
        title="Attendance & Task Backend",
        description="Daily check-in/check-out attendance and personal tasks",
        version=settings.VERSION or DEFAULT_VERSION,
    )

    engine = build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.token_service = TokenService.from_settings(settings)

    # SQLite gets its tables directly; other databases are migrated with Alembic
    if engine.dialect.name == "sqlite":
        create_tables(engine)

    # Configure CORS - must be before other middleware
    allowed_origins = settings.get_allowed_origins_list()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=allowed_origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(api_router, prefix=API_PREFIX)

    @app.on_event("startup")
    def startup_log_config() -> None:
        """Log DATABASE_URL at startup so it can be verified against Alembic."""
        logger.info("DATABASE_URL (app): %s", _mask_database_url(settings.DATABASE_URL))
        logger.info("Attendance day key zone: %s", settings.ATTENDANCE_TZ or "server local")

    return app
