"""
Prometheus metrics for the TeamUp backend.

HTTP traffic is recorded by PrometheusMiddleware. Calls to GitHub and Gemini
are recorded by the instrumented HTTP client, and the services bump the
team-formation counters directly.
"""

import re
import time
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from typing import Callable

from fastapi import Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    Counter,
    Gauge,
    Histogram,
    Info,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware

try:
    APP_VERSION = get_version("teamup-backend")
except PackageNotFoundError:
    APP_VERSION = "unknown"

app_info = Info("teamup_app", "TeamUp backend build information")
app_info.info({"version": APP_VERSION})

# HTTP
http_requests_total = Counter(
    "teamup_http_requests_total",
    "HTTP requests by method, route and status",
    ["method", "endpoint", "status"],
)
http_request_duration_seconds = Histogram(
    "teamup_http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)
http_requests_in_progress = Gauge(
    "teamup_http_requests_in_progress",
    "HTTP requests currently being served",
    ["method"],
)

# Cache
cache_hits_total = Counter("teamup_cache_hits_total", "Redis cache hits")
cache_misses_total = Counter("teamup_cache_misses_total", "Redis cache misses")

# Upstream APIs (github, gemini)
external_api_requests_total = Counter(
    "teamup_external_api_requests_total",
    "Requests sent to upstream APIs",
    ["service"],
)
external_api_errors_total = Counter(
    "teamup_external_api_errors_total",
    "Upstream API requests that failed or returned an error status",
    ["service"],
)
external_api_duration_seconds = Histogram(
    "teamup_external_api_duration_seconds",
    "Upstream API latency",
    ["service"],
    buckets=(0.1, 0.5, 1.0, 2.0, 5.0, 15.0, 60.0),
)

# Team formation
teams_created_total = Counter("teamup_teams_created_total", "Teams created")
teams_terminated_total = Counter("teamup_teams_terminated_total", "Teams dissolved by their leader")
invitations_sent_total = Counter(
    "teamup_invitations_sent_total",
    "Invitations and join requests sent",
    ["type"],
)
invitations_resolved_total = Counter(
    "teamup_invitations_resolved_total",
    "Invitations and join requests answered",
    ["type", "status"],
)
messages_sent_total = Counter("teamup_messages_sent_total", "Direct messages sent")
notifications_created_total = Counter(
    "teamup_notifications_created_total",
    "In-app notifications created",
    ["type"],
)
verifications_total = Counter(
    "teamup_verifications_total",
    "Skill verification attempts",
    ["source", "result"],
)

# Auth
auth_login_attempts_total = Counter("teamup_auth_login_attempts_total", "Login attempts", ["status"])
auth_signups_total = Counter("teamup_auth_signups_total", "Signup attempts", ["status"])

uptime_seconds = Gauge("teamup_uptime_seconds", "Seconds since process start")
_STARTED_AT = time.time()


async def metrics_endpoint(request: Request) -> Response:
    """Expose the default registry for scraping."""
    uptime_seconds.set(time.time() - _STARTED_AT)
    return Response(content=generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)


_UUID_RE = re.compile(r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}")


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Records count, latency and concurrency of every request except /metrics."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path == "/metrics":
            return await call_next(request)

        method = request.method
        endpoint = self._normalize_path(request.url.path)
        status = "500"
        started = time.perf_counter()
        http_requests_in_progress.labels(method=method).inc()
        try:
            response = await call_next(request)
            status = str(response.status_code)
            return response
        finally:
            http_requests_in_progress.labels(method=method).dec()
            http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(
                time.perf_counter() - started
            )
            http_requests_total.labels(method=method, endpoint=endpoint, status=status).inc()

    @staticmethod
    def _normalize_path(path: str) -> str:
        """Collapse entity ids so that metrics group per route."""
        return _UUID_RE.sub("{id}", path)
