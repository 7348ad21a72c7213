from __future__ import annotations

from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator

from ticketing.api.envelope import Envelope, ok
from ticketing.api.errors import register_error_handlers
from ticketing.api.router import router as api_router
from ticketing.api.schemas import StatusOut
from ticketing.core.config import Settings, settings
from ticketing.core.logging import configure_logging
from ticketing.middleware.cors import CORSMiddleware
from ticketing.middleware.request_logging import RequestLoggingMiddleware


def create_app(config: Settings | None = None) -> FastAPI:
    config = config or settings
    configure_logging(config.log_level)

    app = FastAPI(title="Ticketing API")
    register_error_handlers(app)

    # Starlette runs the LAST added middleware FIRST (outermost), so request
    # logging also covers preflight responses produced by CORS.
    app.add_middleware(CORSMiddleware, allow_origins=config.cors_allow_origins)
    app.add_middleware(RequestLoggingMiddleware)

    if config.metrics_enabled:
        Instrumentator().instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)

    @app.get("/health", response_model=Envelope[StatusOut])
    def health():
        return ok(StatusOut(status="ok"))

    app.include_router(api_router)
    return app


app = create_app()
