from __future__ import annotations

from enum import Enum
from typing import Any, Generic, TypeVar

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

T = TypeVar("T")


class ErrorCode(str, Enum):
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL_ERROR = "internal_error"


class ErrorBody(BaseModel):
    code: ErrorCode
    message: str


class Envelope(BaseModel, Generic[T]):
    data: T | None = None
    error: ErrorBody | None = None


def ok(data: Any) -> dict[str, Any]:
    # empty collections stay empty, never null
    if data is None:
        data = {}
    return {"data": data, "error": None}


def error_response(
    status_code: int,
    code: ErrorCode,
    message: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = Envelope[None](error=ErrorBody(code=code, message=message))
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body),
        headers=headers,
    )
