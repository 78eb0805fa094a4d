"""Typed service errors and their mapping onto HTTP responses."""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from src import config

# Configure logging
logger = logging.getLogger(__name__)


class BlogError(Exception):
    """Base class for failures returned to the immediate caller."""

    status_code = status.HTTP_400_BAD_REQUEST
    headers: Optional[dict] = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(BlogError):
    status_code = status.HTTP_400_BAD_REQUEST


class Unauthorized(BlogError):
    status_code = status.HTTP_401_UNAUTHORIZED
    headers = {"WWW-Authenticate": "Bearer"}


class InvalidToken(Unauthorized):
    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class TokenExpired(Unauthorized):
    def __init__(self, message: str = "Token expired"):
        super().__init__(message)


class Forbidden(BlogError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(BlogError):
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(BlogError):
    status_code = status.HTTP_409_CONFLICT


def _error_response(status_code: int, message: str, headers: Optional[dict] = None, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, **extra},
        headers=headers,
    )


async def blog_error_handler(request: Request, exc: BlogError) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return _error_response(exc.status_code, exc.message, exc.headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info(f"Validation errors on {request.method} {request.url.path}")
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        "Validation errors",
        errors=jsonable_errors(exc.errors()),
    )


async def pydantic_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        "Validation errors",
        errors=jsonable_errors(exc.errors()),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    return _error_response(status.HTTP_409_CONFLICT, "Duplicate field value entered")


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        message = f"Not found - {request.url.path}"
    else:
        message = str(exc.detail)
    return _error_response(exc.status_code, message, getattr(exc, "headers", None))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    extra = {"error": str(exc)} if config.is_development() else {}
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server Error", **extra)


def jsonable_errors(errors) -> list:
    """Reduce pydantic error dicts to JSON-safe field/message pairs."""
    return [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", ""),
        }
        for error in errors
    ]


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers that turn failures into the JSON error envelope."""
    app.add_exception_handler(BlogError, blog_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationError, pydantic_validation_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
