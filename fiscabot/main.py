"""
Fiscabot - Main Application Entry Point
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from prometheus_client import make_asgi_app
from slowapi.errors import RateLimitExceeded

from fiscabot import __version__
from fiscabot.api.router import api_router
from fiscabot.core.config import settings
from fiscabot.core.errors import FiscabotError, PersistenceFailure
from fiscabot.core.logging import RequestContextMiddleware, setup_logging
from fiscabot.core.metrics import MetricsMiddleware
from fiscabot.core.rate_limiter import RateLimitMiddleware, limiter, rate_limit_handler
from fiscabot.storage import get_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for startup and shutdown."""
    # Startup
    setup_logging()
    Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
    store = get_store()
    logger.info(
        "fiscabot_started",
        extra={"backend": store.backend, "port": settings.PORT},
    )
    yield


app = FastAPI(
    title="Fiscabot",
    description="Citizen complaint (denúncia) intake with photo uploads, viewer pages and QR codes",
    version=__version__,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

app.state.limiter = limiter

# Middleware
app.add_middleware(RateLimitMiddleware)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestContextMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)


@app.exception_handler(FiscabotError)
async def fiscabot_error_handler(request: Request, exc: FiscabotError) -> JSONResponse:
    payload = exc.to_payload()
    if isinstance(exc, PersistenceFailure) and settings.EXPOSE_ERROR_DETAILS:
        payload.update(exc.diagnostics())
    return JSONResponse(payload, status_code=exc.status_code)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", extra={"path": request.url.path})
    return JSONResponse({"ok": False, "error": "Erro interno"}, status_code=500)


app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
app.add_exception_handler(Exception, unhandled_error_handler)

# Mount Prometheus metrics
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)

# Include API routes
app.include_router(api_router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "fiscabot"}


@app.get("/ping", response_class=PlainTextResponse)
async def ping():
    return "pong"


@app.get("/api")
async def root():
    """Service information."""
    return {
        "service": "Fiscabot",
        "version": __version__,
        "backend": settings.STORAGE_BACKEND,
        "docs": "/api/docs",
        "health": "/health",
        "metrics": "/metrics",
    }


# Frontend (index.html, script.js, style.css) must stay the last mount.
if settings.STATIC_DIR:
    app.mount(
        "/",
        StaticFiles(directory=settings.STATIC_DIR, html=True),
        name="static",
    )


def run() -> None:
    import uvicorn

    uvicorn.run("fiscabot.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
