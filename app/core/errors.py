from __future__ import annotations

import functools
import logging
from http import HTTPStatus
from typing import Any, Awaitable, Callable, TypeVar

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


class AppError(Exception):
    """Base class for failures that map onto an HTTP error envelope."""

    status_code: int = 500
    code: str = "internal_server_error"
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, details: Any | None = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    code = "validation_error"
    default_message = "Validation failed"


class AuthenticationError(AppError):
    status_code = 401
    code = "unauthorized"
    default_message = "Authentication required"


class AuthorizationError(AppError):
    status_code = 403
    code = "forbidden"
    default_message = "Insufficient permissions"


class NotFoundError(AppError):
    status_code = 404
    code = "not_found"
    default_message = "Resource not found"


class ConflictError(AppError):
    status_code = 409
    code = "conflict"
    default_message = "Resource already exists"


class InternalError(AppError):
    status_code = 500
    code = "internal_server_error"
    default_message = "Internal server error"


def reraise_as_internal(message: str) -> Callable[[F], F]:
    """Let ``AppError`` through unchanged and wrap anything else as ``InternalError(message)``.

    Decorates async methods of objects exposing a ``logger`` attribute.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(self, *args, **kwargs):
            try:
                return await func(self, *args, **kwargs)
            except AppError:
                raise
            except Exception as exc:
                getattr(self, "logger", logger).error("%s: %s", message, exc, exc_info=exc)
                raise InternalError(message) from exc

        return wrapper  # type: ignore[return-value]

    return decorator


def _default_code(status_code: int) -> str:
    mapping = {
        400: "bad_request",
        401: "unauthorized",
        403: "forbidden",
        404: "not_found",
        405: "method_not_allowed",
        409: "conflict",
        429: "rate_limited",
    }
    return mapping.get(status_code, "http_error")


def _default_message(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Request failed"


def _normalize_details(details: Any) -> dict:
    if details is None:
        return {}
    if isinstance(details, dict):
        return details
    if isinstance(details, list):
        return {"errors": details}
    if isinstance(details, str):
        return {"detail": details}
    return {"detail": str(details)}


def _build_response(
    status_code: int,
    code: str,
    message: str,
    details: Any | None = None,
) -> JSONResponse:
    payload = {
        "success": False,
        "data": None,
        "error": message,
        "code": code,
        "details": _normalize_details(details),
    }
    return JSONResponse(status_code=status_code, content=jsonable_encoder(payload))


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Request failed path=%s error=%s", request.url.path, exc.message, exc_info=exc)
    else:
        logger.warning(
            "Request rejected path=%s status=%s error=%s",
            request.url.path,
            exc.status_code,
            exc.message,
        )
    return _build_response(exc.status_code, exc.code, exc.message, exc.details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404 and exc.detail == _default_message(404):
        message = f"Route {request.method} {request.url.path} not found"
    elif isinstance(exc.detail, str):
        message = exc.detail
    else:
        message = _default_message(exc.status_code)
    response = _build_response(exc.status_code, _default_code(exc.status_code), message)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


def _public_error(error: dict) -> dict:
    # Submitted values (passwords included) are never echoed back.
    return {key: value for key, value in error.items() if key not in {"input", "ctx", "url"}}


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    message = "Validation failed"
    if errors:
        first = errors[0] or {}
        loc = first.get("loc") or []
        msg = first.get("msg") or "Validation failed"
        # Drop the request section (body/query/path) from the location
        loc_parts = [str(part) for part in loc if part not in {"body", "query", "path", "header"}]
        if loc_parts:
            message = f"{'.'.join(loc_parts)}: {msg}"
        else:
            message = str(msg)
    return _build_response(
        status_code=400,
        code=ValidationError.code,
        message=message,
        details={"errors": [_public_error(error) for error in errors]},
    )


async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    details = getattr(exc, "detail", None)
    response = _build_response(
        status_code=429,
        code="rate_limited",
        message=_default_message(429),
        details=details,
    )
    headers = getattr(exc, "headers", None)
    if isinstance(headers, dict):
        response.headers.update(headers)
    return response


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error method=%s path=%s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return _build_response(
        status_code=500,
        code=InternalError.code,
        message=InternalError.default_message,
        details={},
    )


def register_exception_handlers(app) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
