"""
Prometheus metrics and instrumentation helpers.
"""

from __future__ import annotations

import time
from typing import Awaitable, Callable

from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Mount


HTTP_REQUESTS_TOTAL = Counter(
    "app_http_requests_total",
    "Total count of HTTP requests processed.",
    ["method", "path", "status"],
)

HTTP_REQUEST_DURATION = Histogram(
    "app_http_request_duration_seconds",
    "Histogram of HTTP request durations in seconds.",
    ["method", "path"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10),
)

HTTP_REQUEST_ERRORS = Counter(
    "app_http_request_errors_total",
    "Count of HTTP requests resulting in error responses.",
    ["method", "path", "status"],
)

REPORTS_SUBMITTED = Counter(
    "app_reports_submitted_total",
    "Complaint submissions partitioned by outcome.",
    ["outcome"],
)

PHOTOS_STORED = Counter(
    "app_report_photos_stored_total",
    "Photos stored alongside accepted complaints.",
)


UNMATCHED_PATH = "unmatched"


def _normalise_path(request: Request) -> str:
    """
    Label a request by its route template, never by the raw URL.

    Requests served by a mount are labelled with the mount prefix (``/`` for
    the frontend mount). Anything else, such as 404s for unknown URLs, shares
    the ``unmatched`` label so scanners cannot grow the label set.
    """
    route = request.scope.get("route")
    template = getattr(route, "path_format", None) or getattr(route, "path", None)
    if template:
        return template

    path = request.url.path
    app = request.scope.get("app")
    for candidate in getattr(app, "routes", ()):
        if not isinstance(candidate, Mount):
            continue
        prefix = candidate.path
        if not prefix or path == prefix or path.startswith(prefix + "/"):
            return prefix or "/"
    return UNMATCHED_PATH


def observe_http_request(method: str, path: str, status_code: int, duration: float) -> None:
    """Record metrics for an HTTP request."""
    status_str = str(status_code)
    HTTP_REQUESTS_TOTAL.labels(method=method, path=path, status=status_str).inc()
    HTTP_REQUEST_DURATION.labels(method=method, path=path).observe(duration)

    if status_code >= 400:
        HTTP_REQUEST_ERRORS.labels(method=method, path=path, status=status_str).inc()


def record_submission(outcome: str, photos: int = 0) -> None:
    """Count a submission attempt (accepted, rejected or failed)."""
    REPORTS_SUBMITTED.labels(outcome=outcome).inc()
    if photos:
        PHOTOS_STORED.inc(photos)


class MetricsMiddleware(BaseHTTPMiddleware):
    """ASGI middleware for capturing request metrics."""

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        method = request.method
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            duration = time.perf_counter() - start
            observe_http_request(method, _normalise_path(request), 500, duration)
            raise

        duration = time.perf_counter() - start
        observe_http_request(method, _normalise_path(request), response.status_code, duration)
        return response


__all__ = [
    "MetricsMiddleware",
    "UNMATCHED_PATH",
    "HTTP_REQUESTS_TOTAL",
    "HTTP_REQUEST_DURATION",
    "HTTP_REQUEST_ERRORS",
    "REPORTS_SUBMITTED",
    "PHOTOS_STORED",
    "observe_http_request",
    "record_submission",
]
