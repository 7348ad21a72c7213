from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from ticketing.api.envelope import ErrorCode, error_response
from ticketing.services.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ServiceError,
    ValidationError,
)

logger = structlog.get_logger()

INTERNAL_MESSAGE = "internal server error"

_STATUS_CODES = {
    status.HTTP_400_BAD_REQUEST: ErrorCode.BAD_REQUEST,
    status.HTTP_401_UNAUTHORIZED: ErrorCode.UNAUTHORIZED,
    status.HTTP_403_FORBIDDEN: ErrorCode.FORBIDDEN,
    status.HTTP_404_NOT_FOUND: ErrorCode.NOT_FOUND,
    status.HTTP_409_CONFLICT: ErrorCode.CONFLICT,
}


class ApiError(Exception):
    """An error that is already decided: status, envelope code and safe message."""

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        message: str,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.status_code = status_code
        self.code = code
        self.message = message
        self.headers = headers
        super().__init__(message)

    @classmethod
    def bad_request(cls, message: str) -> ApiError:
        return cls(status.HTTP_400_BAD_REQUEST, ErrorCode.BAD_REQUEST, message)

    @classmethod
    def unauthorized(cls, message: str, headers: dict[str, str] | None = None) -> ApiError:
        return cls(status.HTTP_401_UNAUTHORIZED, ErrorCode.UNAUTHORIZED, message, headers)

    @classmethod
    def forbidden(cls, message: str = "forbidden") -> ApiError:
        return cls(status.HTTP_403_FORBIDDEN, ErrorCode.FORBIDDEN, message)

    @classmethod
    def not_found(cls, message: str) -> ApiError:
        return cls(status.HTTP_404_NOT_FOUND, ErrorCode.NOT_FOUND, message)

    @classmethod
    def conflict(cls, message: str) -> ApiError:
        return cls(status.HTTP_409_CONFLICT, ErrorCode.CONFLICT, message)

    @classmethod
    def internal(cls, message: str = INTERNAL_MESSAGE) -> ApiError:
        return cls(status.HTTP_500_INTERNAL_SERVER_ERROR, ErrorCode.INTERNAL_ERROR, message)


def http_error_from_service(
    err: ServiceError,
    *,
    not_found: str | None = None,
    forbidden: str | None = None,
    conflict: str | None = None,
    bad_request: str | None = None,
    unauthorized: str | None = None,
) -> ApiError | None:
    """Map a service error to its HTTP form, or None when it has no mapping.

    Keyword overrides replace the service message for one category so each
    endpoint can word its own not-found/forbidden/conflict responses.
    """
    if isinstance(err, ValidationError):
        return ApiError.bad_request(bad_request or err.message)
    if isinstance(err, AuthenticationError):
        return ApiError.unauthorized(unauthorized or err.message)
    if isinstance(err, NotFoundError):
        return ApiError.not_found(not_found or err.message)
    if isinstance(err, AuthorizationError):
        return ApiError.forbidden(forbidden or "forbidden")
    if isinstance(err, ConflictError):
        return ApiError.conflict(conflict or err.message)
    return None


@contextmanager
def service_errors(request: Request, **overrides: str) -> Iterator[None]:
    """Translate anything raised inside the block into an ``ApiError``.

    Unmapped failures are logged with the request path/method and surface as a
    generic 500; mapped ones are client errors and are not logged.
    """
    try:
        yield
    except ApiError:
        raise
    except ServiceError as exc:
        mapped = http_error_from_service(exc, **overrides)
        if mapped is None:
            _log_failure(request, exc)
            raise ApiError.internal() from exc
        raise mapped from exc
    except Exception as exc:
        _log_failure(request, exc)
        raise ApiError.internal() from exc


def _log_failure(request: Request, exc: BaseException) -> None:
    logger.error(
        "request_failed",
        path=request.url.path,
        method=request.method,
        err=str(exc),
        exc_info=exc,
    )


def _validation_message(error: dict[str, Any]) -> str:
    loc = [str(part) for part in error.get("loc", ()) if part != "body"]
    field = ".".join(loc)
    kind = error.get("type", "")
    msg = str(error.get("msg", "invalid request"))

    if kind == "extra_forbidden":
        return f'unknown field "{field}"'
    if kind == "json_invalid":
        detail = (error.get("ctx") or {}).get("error")
        return f"invalid JSON: {detail}" if detail else "invalid JSON"
    if kind == "missing":
        return f"{field} is required" if field else "request body is required"
    if kind in ("model_type", "model_attributes_type", "dict_type"):
        return "request body must be a JSON object"
    if kind == "value_error":
        # model-level violations already read as sentences
        msg = msg.removeprefix("Value error, ")
        return f"{field}: {msg}" if field else msg
    return f"{field}: {msg}" if field else msg


def validation_message(exc: RequestValidationError) -> str:
    return "; ".join(_validation_message(e) for e in exc.errors())


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        return error_response(exc.status_code, exc.code, exc.message, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            ErrorCode.BAD_REQUEST,
            validation_message(exc),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        code = _STATUS_CODES.get(exc.status_code)
        if code is None:
            code = ErrorCode.INTERNAL_ERROR if exc.status_code >= 500 else ErrorCode.BAD_REQUEST
        return error_response(exc.status_code, code, str(exc.detail).lower(), headers=exc.headers)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        _log_failure(request, exc)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorCode.INTERNAL_ERROR,
            INTERNAL_MESSAGE,
        )
