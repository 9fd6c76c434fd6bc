"""
Central error handling for the attendance backend
"""
import logging
import traceback
from typing import Any, Dict, List

from fastapi import Request
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.config import Settings
from app.core.exceptions import AppError, Internal, ValidationFailed

logger = logging.getLogger(__name__)


def _settings(request: Request) -> Settings:
    return request.app.state.settings


def _error_body(status_code: int, detail: Any, request: Request) -> Dict[str, Any]:
    return {
        "error": True,
        "status_code": status_code,
        "detail": detail,
        "path": str(request.url.path),
    }


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """
    Handle typed business errors (unauthenticated, conflict, not found, ...)

    These are expected outcomes: rendered with their stable message, never
    logged as errors.
    """
    logger.info(
        "%s %s -> %s %s: %s",
        request.method, request.url.path, exc.status_code, type(exc).__name__, exc.detail,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.status_code, exc.detail, request),
        headers=exc.headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Handle HTTPException with consistent JSON response format

    Args:
        request: FastAPI request object
        exc: HTTPException instance (FastAPI or Starlette)

    Returns:
        JSONResponse with error details
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.status_code, exc.detail, request),
        headers=getattr(exc, "headers", None),
    )


def _field_errors(exc: RequestValidationError) -> List[Dict[str, str]]:
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({
            "field": ".".join(loc) or "body",
            "message": str(err.get("msg", "Invalid value")),
        })
    return errors


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle RequestValidationError as ValidationFailed

    Does not leak internal validation details in production.

    Args:
        request: FastAPI request object
        exc: RequestValidationError instance

    Returns:
        JSONResponse with error details
    """
    failure = ValidationFailed()
    if _settings(request).is_production:
        return JSONResponse(
            status_code=failure.status_code,
            content=_error_body(failure.status_code, "Validation error: Invalid request data", request),
        )

    content = _error_body(failure.status_code, failure.detail, request)
    content["errors"] = _field_errors(exc)
    return JSONResponse(status_code=failure.status_code, content=content)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions as Internal

    Does not leak internal error details in production.

    Args:
        request: FastAPI request object
        exc: Exception instance

    Returns:
        JSONResponse with error details
    """
    settings = _settings(request)
    logger.error(
        "Unhandled exception on %s %s: %s", request.method, request.url.path, exc, exc_info=exc,
    )

    failure = Internal()
    if settings.is_production:
        return JSONResponse(
            status_code=failure.status_code,
            content=_error_body(failure.status_code, failure.detail, request),
        )

    content = _error_body(failure.status_code, str(exc), request)
    if settings.APP_ENV == "local":
        content["traceback"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(status_code=failure.status_code, content=content)
