from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Annotated

import structlog
from fastapi import Depends, Request

from ticketing.api.errors import ApiError
from ticketing.auth.jwt import JwtTokens
from ticketing.services.exceptions import AuthenticationError
from ticketing.services.interfaces import TokenVerifier

logger = structlog.get_logger()

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class AuthContext:
    """Who is calling. Built once per request by ``require_auth``."""

    user_id: str


@lru_cache
def get_jwt_tokens() -> JwtTokens:
    return JwtTokens()


def get_token_verifier() -> TokenVerifier:
    return get_jwt_tokens()


def _unauthorized(message: str) -> ApiError:
    return ApiError.unauthorized(message, headers={"WWW-Authenticate": "Bearer"})


def require_auth(
    request: Request,
    verifier: Annotated[TokenVerifier, Depends(get_token_verifier)],
) -> AuthContext:
    header = request.headers.get("Authorization")
    if header is None:
        raise _unauthorized("missing authorization header")
    if not header.startswith(BEARER_PREFIX):
        raise _unauthorized("invalid authorization format")

    token = header[len(BEARER_PREFIX):].strip()
    if not token:
        raise _unauthorized("missing token")

    try:
        user_id = verifier.verify(token)
    except AuthenticationError as exc:
        logger.info("token_rejected", reason=exc.message)
        raise _unauthorized("invalid or expired token") from None

    ctx = AuthContext(user_id=user_id)
    request.state.auth = ctx
    return ctx


Caller = Annotated[AuthContext, Depends(require_auth)]
