"""FastAPI app factory for the ScamShield API."""

import logging
import time
from typing import Dict, List

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from scamshield.api.analysis import router as analysis_router
from scamshield.api.reports import router as reports_router
from scamshield.errors import ReportNotFoundError, RepositoryError, ValidationError
from scamshield.settings import get_settings

LOGGER = logging.getLogger(__name__)

# In-memory request log keyed by client address. Single-process only.
REQUEST_LOG: Dict[str, List[float]] = {}
RATE_LIMIT_WINDOW_SECONDS = 60


async def _validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


async def _not_found_handler(request: Request, exc: ReportNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


async def _repository_error_handler(request: Request, exc: RepositoryError) -> JSONResponse:
    LOGGER.warning("Repository failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": "Report storage is unavailable. Try again later."})


def _forget_idle_clients(window_start: float) -> None:
    for client, timestamps in list(REQUEST_LOG.items()):
        if not timestamps or timestamps[-1] <= window_start:
            del REQUEST_LOG[client]


async def rate_limit_middleware(request: Request, call_next):
    """
    Basic per-client rate limiter. Blocks clients that exceed the configured
    requests-per-minute in a rolling 60s window.
    """
    client_ip = request.headers.get("x-forwarded-for") or (request.client.host if request.client else "unknown")
    now = time.time()
    window_start = now - RATE_LIMIT_WINDOW_SECONDS

    _forget_idle_clients(window_start)
    timestamps = REQUEST_LOG.setdefault(client_ip, [])
    timestamps[:] = [t for t in timestamps if t > window_start]

    if len(timestamps) >= get_settings().api.max_requests_per_minute:
        return JSONResponse(status_code=429, content={"detail": "Rate limit exceeded. Try again later."})

    timestamps.append(now)
    return await call_next(request)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance.
    """
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(title="ScamShield API", version="0.1")
    app.include_router(analysis_router)
    app.include_router(reports_router)
    app.add_exception_handler(ValidationError, _validation_error_handler)
    app.add_exception_handler(ReportNotFoundError, _not_found_handler)
    app.add_exception_handler(RepositoryError, _repository_error_handler)
    app.middleware("http")(rate_limit_middleware)

    @app.get("/health", tags=["health"])
    def health():
        return {"status": "ok", "env": settings.env, "backend": settings.repository_backend}

    return app


# For uvicorn, expose `app` at module level
app = create_app()

__all__ = ["app", "create_app", "REQUEST_LOG"]
