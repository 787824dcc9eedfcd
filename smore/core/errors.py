from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("smore.errors")


class AppError(Exception):
    """Base class for failures that map onto a specific HTTP status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "internal_error"
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationConflict(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_conflict"
    default_message = "Request conflicts with existing data"


class DuplicateEmail(ValidationConflict):
    code = "duplicate_email"
    default_message = "Email is already in use"


class EmailNotFound(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "email_not_found"
    default_message = "Email not found"


class InvalidPassword(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_password"
    default_message = "Invalid password"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_message = "Not found"


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthenticated"
    default_message = "Authorization required"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    default_message = "Invalid or expired token"


class Internal(AppError):
    pass


class ErrorEnvelope(JSONResponse):
    def __init__(
        self,
        *,
        status_code: int,
        code: str,
        message: str,
        details: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        # ``error`` mirrors ``message`` for clients that read either field.
        payload: dict[str, Any] = {"code": code, "message": message, "error": message}
        if details is not None:
            payload["details"] = details
        super().__init__(payload, status_code=status_code, headers=headers)


async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("request.failed", extra={"extra_data": {"path": request.url.path, "code": exc.code}})
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    return ErrorEnvelope(status_code=exc.status_code, code=exc.code, message=exc.message, headers=headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail
    message = detail if isinstance(detail, str) else "Error"
    details = detail if isinstance(detail, dict) else None
    return ErrorEnvelope(status_code=exc.status_code, code="http_error", message=message, details=details)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return ErrorEnvelope(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        code="validation_error",
        message="Validation failed",
        details={"errors": jsonable_encoder(exc.errors())},
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "request.unhandled_exception",
        exc_info=exc,
        extra={"extra_data": {"method": request.method, "path": request.url.path}},
    )
    return ErrorEnvelope(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code=Internal.code,
        message=Internal.default_message,
    )
