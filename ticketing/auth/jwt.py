from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
from jwt import PyJWTError

from ticketing.core.config import settings
from ticketing.services.error_codes import ErrorCode
from ticketing.services.exceptions import AuthenticationError


def _now() -> datetime:
    return datetime.now(timezone.utc)


class JwtTokens:
    """Issues and verifies signed access tokens.

    Implements both ``TokenIssuer`` and ``TokenVerifier``. The subject claim is
    the user id; verification hands back nothing else.
    """

    def __init__(
        self,
        secret: str | None = None,
        algorithm: str | None = None,
        issuer: str | None = None,
        audience: str | None = None,
        ttl_seconds: int | None = None,
    ) -> None:
        self.secret = secret or settings.jwt_secret
        self.algorithm = algorithm or settings.jwt_algorithm
        self.issuer = issuer or settings.jwt_issuer
        self.audience = audience or settings.jwt_audience
        self.ttl_seconds = ttl_seconds or settings.access_token_ttl_seconds

    def issue(self, user_id: str, email: str, roles: list[str], ttl_seconds: int | None = None) -> str:
        now = _now()
        exp = now + timedelta(seconds=ttl_seconds or self.ttl_seconds)
        payload = {
            "sub": str(user_id),
            "email": email,
            "roles": roles,
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
            "iss": self.issuer,
            "aud": self.audience,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> str:
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                audience=self.audience,
                options={"require": ["sub", "exp"]},
            )
        except PyJWTError as exc:
            raise AuthenticationError(ErrorCode.INVALID_TOKEN, "invalid access token") from exc

        user_id = claims.get("sub")
        if not user_id:
            raise AuthenticationError(ErrorCode.INVALID_TOKEN, "token has no subject")
        return str(user_id)
