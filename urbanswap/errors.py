"""
Error taxonomy and the handlers that turn errors into the failure envelope.

Every failure leaving the API looks like:
    {"success": false, "message": "...", "code": "...", "errors": [...]}
"""

import logging

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from urbanswap import config
from urbanswap.models.responses import ErrorResponse

logger = logging.getLogger(__name__)


class AppError(HTTPException):
    status_code = 500
    code = "unexpected_error"
    default_message = "Something went wrong"

    def __init__(self, message: str | None = None, errors: list[str] | None = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(status_code=self.status_code, detail=self.message)


class ValidationError(AppError):
    status_code = 400
    code = "validation_error"
    default_message = "Validation failed"


class ConflictError(AppError):
    status_code = 400
    code = "conflict"
    default_message = "Resource already exists"


class AuthError(AppError):
    status_code = 401
    code = "auth_error"
    default_message = "Authentication required"


class ForbiddenError(AppError):
    status_code = 403
    code = "forbidden"
    default_message = "You do not have permission to access this resource"


class SelfSwapError(ForbiddenError):
    """Requesting a swap on your own listing. Reported as a bad request."""

    status_code = 400
    code = "self_swap"
    default_message = "You cannot request a swap for your own listing"


class NotFoundError(AppError):
    status_code = 404
    code = "not_found"
    default_message = "Not found"


class UnexpectedError(AppError):
    status_code = 500
    code = "unexpected_error"
    default_message = "Internal server error"


_CODES_BY_STATUS = {
    400: "validation_error",
    401: "auth_error",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
}


def _envelope(status_code: int, message: str, code: str, errors: list[str] | None = None, headers=None):
    body = ErrorResponse(message=message, code=code, errors=errors)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _envelope(exc.status_code, exc.message, exc.code, exc.errors, getattr(exc, "headers", None))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404 and exc.detail == "Not Found":
        message = "API endpoint not found"
    else:
        message = str(exc.detail)
    code = _CODES_BY_STATUS.get(exc.status_code, "http_error")
    return _envelope(exc.status_code, message, code, headers=getattr(exc, "headers", None))


def format_validation_errors(errors) -> list[str]:
    """Flatten pydantic error dicts into "field: message" strings."""
    messages = []
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "form")]
        field = ".".join(location)
        text = error.get("msg", "Invalid value")
        messages.append(f"{field}: {text}" if field else text)
    return messages


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _envelope(400, "Validation failed", "validation_error", format_validation_errors(exc.errors()))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {type(exc).__name__}: {exc}", exc_info=True)
    errors = [str(exc)] if config.IS_DEVELOPMENT else None
    return _envelope(500, "Internal server error", "unexpected_error", errors)


def register_exception_handlers(app) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


def unexpected(message: str, exc: Exception) -> UnexpectedError:
    """Wrap a backend failure; the cause is only shown in development."""
    errors = [f"{type(exc).__name__}: {exc}"] if config.IS_DEVELOPMENT else None
    return UnexpectedError(message, errors=errors)


def validation_failed(exc) -> ValidationError:
    """Turn a pydantic ValidationError raised inside a handler into a 400."""
    return ValidationError("Validation failed", errors=format_validation_errors(exc.errors()))
