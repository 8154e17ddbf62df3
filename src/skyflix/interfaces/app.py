"""FastAPI application factory (create_app)."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.responses import Response

from skyflix.infrastructure.config import AppConfig
from skyflix.infrastructure.graceful_shutdown import GracefulShutdown
from skyflix.interfaces.api.videohosting import router as videohosting_router
from skyflix.interfaces.app_state import AppState
from skyflix.interfaces.composition import lifespan

log = structlog.get_logger(__name__)


def create_app(config: AppConfig) -> FastAPI:
    """Create FastAPI app - configuration only, no resource initialization.

    Resources (HTTP client, cache, index) are created in lifespan().
    """
    app = FastAPI(
        title="Skyflix",
        description="Movie/series link aggregator over video hosting providers",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config
    app.state.graceful_shutdown = GracefulShutdown()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(videohosting_router, prefix="/api")

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Liveness probe."""
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": config.app_name,
        }

    @app.get("/api/readyz")
    async def readyz() -> Response:
        """Readiness probe - 200 after startup, 503 before or while stopping."""
        gs: GracefulShutdown = app.state.graceful_shutdown
        if gs.is_ready:
            return JSONResponse({"status": "ready"}, status_code=200)
        return JSONResponse({"status": "not_ready"}, status_code=503)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        log.error(
            "unhandled_request_error",
            method=request.method,
            path=request.url.path,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "message": str(exc)},
        )

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        gs: GracefulShutdown = app.state.graceful_shutdown
        start = time.perf_counter()
        status_code = 500
        async with gs.track():
            try:
                response = await call_next(request)
                status_code = response.status_code
                return response
            finally:
                log.info(
                    "http_request",
                    method=request.method,
                    path=request.url.path,
                    query=str(request.url.query),
                    status_code=status_code,
                    duration_ms=round((time.perf_counter() - start) * 1000.0, 2),
                    client_host=(request.client.host if request.client else None),
                )

    return app
