"""FastAPI application factory (create_app)."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import FastAPI, Request
from starlette.responses import Response

from kvideo.infrastructure.config import AppConfig
from kvideo.interfaces.api.detail.router import router as detail_router
from kvideo.interfaces.api.errors import register_error_handlers
from kvideo.interfaces.api.search.router import router as search_router
from kvideo.interfaces.api.sources.router import router as sources_router
from kvideo.interfaces.app_state import AppState
from kvideo.interfaces.composition import lifespan

log = structlog.get_logger(__name__)


def create_app(config: AppConfig) -> FastAPI:
    """Create FastAPI app: configuration only, no resource initialization.

    Resources (HTTP client, probe pool, use cases) are created in lifespan().
    """
    app = FastAPI(
        title="KVideo",
        description="Multi-source video search with playback validation",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config

    register_error_handlers(app)
    app.include_router(search_router)
    app.include_router(detail_router)
    app.include_router(sources_router)

    @app.get("/api/healthz")
    async def healthz() -> dict[str, str | int]:
        """Liveness probe: 200 as long as the process is running."""
        sources = getattr(app.state, "sources", None)
        return {
            "status": "ok",
            "sources": len(sources.enabled()) if sources else 0,
        }

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ):
        start = time.perf_counter()
        status_code = 500
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
