"""
Prometheus metrics for application monitoring.
"""
import time

from fastapi import Response
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request


# Request metrics
http_requests_total = Counter(
    'http_requests_total',
    'Total number of HTTP requests',
    ['method', 'endpoint', 'status_code']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint'],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0]
)

# Order history metrics
order_history_aggregation_seconds = Histogram(
    'order_history_aggregation_seconds',
    'Time spent loading and grouping order history',
    ['role', 'operation'],
    buckets=[0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5]
)

order_history_orders_skipped_total = Counter(
    'order_history_orders_skipped_total',
    'Orders left out of day groups because their anchor timestamp was missing',
    ['anchor']
)

order_history_groups_built_total = Counter(
    'order_history_groups_built_total',
    'Day groups produced by the group builder',
    ['anchor']
)


def _endpoint_label(request: Request) -> str:
    """Route template (e.g. /order-history/{role}/{owner_id}) so ids don't explode label cardinality."""
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    return path or request.url.path


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware to collect HTTP request metrics."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        if request.url.path == "/metrics":
            return await call_next(request)

        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            duration = time.time() - start_time
            endpoint = _endpoint_label(request)

            http_requests_total.labels(
                method=request.method,
                endpoint=endpoint,
                status_code=status_code
            ).inc()

            http_request_duration_seconds.labels(
                method=request.method,
                endpoint=endpoint
            ).observe(duration)

        return response


def get_metrics_response() -> Response:
    """Get Prometheus metrics response."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
