"""SlowAPI rate limiting setup."""

from __future__ import annotations

from slowapi import Limiter
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from fiscabot.core.config import settings


limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
    enabled=settings.RATE_LIMIT_ENABLED,
)


def rate_limit_handler(request: Request, exc: Exception) -> JSONResponse:
    detail = getattr(exc, "detail", str(exc))
    response = JSONResponse(
        {"ok": False, "error": f"Limite de requisições excedido: {detail}"},
        status_code=429,
    )
    view_limit = getattr(request.state, "view_rate_limit", None)
    if view_limit is not None:
        response = limiter._inject_headers(response, view_limit)
    return response


class RateLimitMiddleware(SlowAPIMiddleware):
    exempt_paths = {
        "/metrics",
        "/health",
        "/ping",
        "/api/health/liveness",
        "/api/health/readiness",
    }

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        if request.url.path in self.exempt_paths:
            return await call_next(request)
        return await super().dispatch(request, call_next)
