"""Error types and handlers for the events API.

Errors are returned in a uniform envelope:

    {"success": false, "error": {"code", "message", "timestamp", "path"}}
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..config.environment import IS_PRODUCTION_ENVIRONMENT
from ..db import DatabaseError

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base exception for errors reported to API consumers."""

    status_code = 500
    error_code = 'INTERNAL_ERROR'

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ApiError):
    """Raised when request parameters are malformed."""
    status_code = 400
    error_code = 'VALIDATION_ERROR'


class NotFoundError(ApiError):
    """Raised when a requested resource does not exist or is inactive."""
    status_code = 404
    error_code = 'NOT_FOUND'


def error_response(request: Request, status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            'success': False,
            'error': {
                'code': code,
                'message': message,
                'timestamp': datetime.now(timezone.utc).isoformat(),
                'path': request.url.path,
            },
        },
    )


async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path} - {exc.error_code}: {exc.message}")
    return error_response(request, exc.status_code, exc.error_code, exc.message)


async def handle_database_error(request: Request, exc: DatabaseError) -> JSONResponse:
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    message = 'Internal Server Error' if IS_PRODUCTION_ENVIRONMENT else f"Database error: {exc}"
    return error_response(request, 500, 'DATABASE_ERROR', message)


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return error_response(
            request, 404, 'ENDPOINT_NOT_FOUND', f"Not Found - {request.method} {request.url.path}"
        )
    return error_response(request, exc.status_code, 'HTTP_ERROR', str(exc.detail))


def register_error_handlers(app: FastAPI) -> None:
    """Install the envelope-producing exception handlers on an app."""
    app.add_exception_handler(ApiError, handle_api_error)
    app.add_exception_handler(DatabaseError, handle_database_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
