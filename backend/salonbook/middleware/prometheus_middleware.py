"""
Prometheus metrics middleware for HTTP request tracking.

Endpoint labels use the matched route template (``/api/bookings/{booking_id}``)
so booking ids never become label values.
"""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ..monitoring.prometheus_metrics import prometheus_metrics


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware to collect Prometheus metrics for HTTP requests."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Skip metrics collection for the metrics endpoint itself
        if request.url.path == "/metrics":
            return await call_next(request)

        start_time = time.time()
        response = await call_next(request)
        duration = time.time() - start_time

        route = request.scope.get("route")
        endpoint = getattr(route, "path", None) or "unmatched"
        prometheus_metrics.record_http_request(
            method=request.method,
            endpoint=endpoint,
            duration=duration,
            status_code=response.status_code,
        )
        return response
