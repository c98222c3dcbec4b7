"""
Error Handling
==============
Application error taxonomy and the FastAPI exception handlers that turn
errors into the uniform JSON body ``{"error": "<message>"}``.

  InvalidArgument  400  malformed / missing / out-of-range input
  Unauthorized     401  bad credentials
  Forbidden        403  account disabled
  NotFound         404  referenced entity absent
  Conflict         409  duplicate key, referenced row
  Unavailable      503  pool exhausted, timeout, lost connection
  Internal         500  anything unexpected
"""
import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import (
    DisconnectionError,
    IntegrityError,
    OperationalError,
    SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map to an HTTP status and a JSON body."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, **extra: Any):
        self.message = message or self.default_message
        self.extra = extra
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"error": self.message}
        body.update(self.extra)
        return body


class InvalidArgument(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid argument"


class Unauthorized(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access disabled"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class Unavailable(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Database unavailable"


class Internal(AppError):
    pass


def _clean_message(msg: str) -> str:
    # pydantic prefixes messages raised from validators
    for prefix in ("Value error, ", "Assertion failed, "):
        if msg.startswith(prefix):
            return msg[len(prefix):]
    return msg


def validation_message(exc: ValidationError | RequestValidationError) -> str:
    """Readable single-line message for the first validation error."""
    errors = exc.errors()
    if not errors:
        return InvalidArgument.default_message
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = loc[-1] if loc else None

    if first.get("type") == "missing":
        return f"Missing required field: {field}" if field else "Request body is required"
    if first.get("type") in ("json_invalid", "model_attributes_type", "dict_type"):
        return "Request body must be a JSON object"

    msg = _clean_message(first.get("msg", ""))
    if field and field not in msg:
        return f"{field}: {msg}"
    return msg


def map_db_error(exc: SQLAlchemyError) -> AppError:
    """Closest taxonomy kind for a store-layer failure."""
    if isinstance(exc, (PoolTimeoutError, OperationalError, DisconnectionError)):
        return Unavailable()
    if isinstance(exc, IntegrityError):
        return Conflict("Conflicting or referenced record")
    return Internal()


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = InvalidArgument(validation_message(exc))
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        message = "Not found"
    else:
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": message, "path": request.url.path},
        headers=getattr(exc, "headers", None),
    )


async def db_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    error = map_db_error(exc)
    logger.error(
        f"Store failure on {request.method} {request.url.path} "
        f"params={dict(request.query_params)}: {exc.__class__.__name__}: {exc}"
    )
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
    error = Internal()
    # ServerErrorMiddleware answers outside log_requests
    headers = {"Cache-Control": "no-store"} if request.url.path.startswith(settings.API_V1_STR) else None
    return JSONResponse(status_code=error.status_code, content=error.to_dict(), headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, db_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
