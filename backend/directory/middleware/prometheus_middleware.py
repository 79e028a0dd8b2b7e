# backend/directory/middleware/prometheus_middleware.py
"""
Prometheus metrics middleware for HTTP request tracking.

The endpoint label is the matched route template (``/api/v1/businesses/{key}``)
so ids and slugs never become label values.
"""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Match

from ..monitoring.prometheus_metrics import prometheus_metrics

METRICS_PATH = "/metrics/prometheus"
UNMATCHED_ENDPOINT = "unmatched"


def endpoint_label(request: Request) -> str:
    for route in request.app.routes:
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            return getattr(route, "path", UNMATCHED_ENDPOINT)
    return UNMATCHED_ENDPOINT


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Collect request count, duration and in-flight gauge per route."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path == METRICS_PATH:
            return await call_next(request)

        method = request.method
        endpoint = endpoint_label(request)
        prometheus_metrics.track_http_request_start(method, endpoint)
        start_time = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            prometheus_metrics.track_http_request_end(method, endpoint)
            prometheus_metrics.record_http_request(
                method=method,
                endpoint=endpoint,
                duration=time.perf_counter() - start_time,
                status_code=status_code,
            )
