"""
Error taxonomy and the FastAPI handlers that turn it into response envelopes
"""
import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import config

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Something went wrong 😿"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        self.message = message or self.message
        self.detail = detail
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message or f"Invalid value for '{field}'")


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str = "Record"):
        self.entity = entity
        super().__init__(f"{entity} not found 🔍")


class AuthError(AppError):
    """Bad credentials or a bad token. The message never says which."""
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid credentials 🔐"


class UpstreamError(AppError):
    """The media host failed."""
    message = "Media service failed 😿"


class InternalError(AppError):
    pass


def envelope_error(status_code: int, message: str, detail: Optional[str] = None) -> JSONResponse:
    content = {"success": False, "message": message}
    if detail is not None and config.is_development():
        content["error"] = detail
    return JSONResponse(status_code=status_code, content=content)


async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} ({exc.detail})")
    return envelope_error(exc.status_code, exc.message, exc.detail)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    field = "body"
    message = "Invalid request"
    if errors:
        # Skip the leading "body"/"query" segment
        loc = [str(part) for part in errors[0].get("loc", ())[1:]]
        if loc:
            field = ".".join(loc)
        message = f"{field}: {errors[0].get('msg', 'invalid value')}"
    return envelope_error(status.HTTP_400_BAD_REQUEST, message, str(errors))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return envelope_error(exc.status_code, "Route not found 🔍")
    return envelope_error(exc.status_code, str(exc.detail))


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unexpected error on {request.method} {request.url.path}")
    return envelope_error(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        InternalError.message,
        f"{type(exc).__name__}: {exc}",
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
