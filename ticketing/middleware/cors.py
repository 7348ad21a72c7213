from __future__ import annotations

from collections.abc import Iterable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

ALLOW_METHODS = "GET, POST, PATCH, PUT, DELETE, OPTIONS"
ALLOW_HEADERS = "Authorization, Content-Type, Accept"
MAX_AGE = "86400"


class CORSMiddleware(BaseHTTPMiddleware):
    """Exact-match origin allow-list.

    Every OPTIONS request is answered here with 204; CORS headers are only
    attached when the Origin is on the list.
    """

    def __init__(self, app: ASGIApp, allow_origins: Iterable[str]) -> None:
        super().__init__(app)
        self.allow_origins = frozenset(o.strip().rstrip("/") for o in allow_origins if o.strip())

    def is_allowed(self, origin: str | None) -> bool:
        return bool(origin) and origin in self.allow_origins

    async def dispatch(self, request: Request, call_next) -> Response:
        origin = request.headers.get("Origin")
        allowed = self.is_allowed(origin)

        if request.method == "OPTIONS":
            response = Response(status_code=204)
            if allowed:
                response.headers["Access-Control-Allow-Origin"] = origin
                response.headers["Access-Control-Allow-Methods"] = ALLOW_METHODS
                response.headers["Access-Control-Allow-Headers"] = ALLOW_HEADERS
                response.headers["Access-Control-Max-Age"] = MAX_AGE
                response.headers["Access-Control-Allow-Credentials"] = "true"
                response.headers["Vary"] = "Origin"
            return response

        response = await call_next(request)
        if allowed:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.headers["Vary"] = "Origin"
        return response
