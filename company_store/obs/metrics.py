"""Prometheus metrics utilities for API and worker processes."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

from fastapi import APIRouter, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_LATENCY_SECONDS = Histogram(
    "http_request_latency_seconds",
    "Latency of HTTP requests in seconds.",
    labelnames=("method", "path"),
)
REQUEST_COUNTER = Counter(
    "http_requests_total",
    "Total number of HTTP requests processed.",
    labelnames=("method", "path", "status"),
)
REQUEST_ERROR_COUNTER = Counter(
    "http_request_errors_total",
    "Total number of HTTP requests that resulted in server errors.",
    labelnames=("method", "path", "status"),
)
REPORT_EXPORT_COUNTER = Counter(
    "report_exports_total",
    "Monthly report exports by output format, company filter and outcome.",
    labelnames=("format", "company", "outcome"),
)
REPORT_ANOMALY_COUNTER = Counter(
    "report_enrichment_anomalies_total",
    "Report rows whose owner was missing or inactive at export time.",
    labelnames=("kind",),
)
PURCHASE_COUNTER = Counter(
    "store_purchases_total",
    "Purchases registered by item code and channel.",
    labelnames=("item", "channel"),
)
CREDIT_GRANTED_COUNTER = Counter(
    "store_credit_granted_total",
    "Sum of credit granted by administrators.",
)


def _route_template(request: Request) -> str:
    # Label by the matched route so path parameters do not explode cardinality.
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware that records request metrics for Prometheus scraping."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:  # type: ignore[override]
        method = request.method
        start_time = time.perf_counter()
        status = "500"

        try:
            response = await call_next(request)
            status = str(response.status_code)
            return response
        finally:
            latency = time.perf_counter() - start_time
            # The route is only known once the router has matched the request.
            path = _route_template(request)
            if status.startswith("5"):
                REQUEST_ERROR_COUNTER.labels(method=method, path=path, status=status).inc()
            REQUEST_LATENCY_SECONDS.labels(method=method, path=path).observe(latency)
            REQUEST_COUNTER.labels(method=method, path=path, status=status).inc()


metrics_router = APIRouter(tags=["observability"])


@metrics_router.get("/metrics", include_in_schema=False)
def metrics_endpoint() -> Response:
    """Expose Prometheus metrics for scraping."""
    payload = generate_latest()
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)


def report_export(fmt: str, company: str | None, outcome: str) -> None:
    """Count a finished report export."""
    REPORT_EXPORT_COUNTER.labels(format=fmt, company=company or "GENERAL", outcome=outcome).inc()


def report_anomalies(kind: str, count: int) -> None:
    if count > 0:
        REPORT_ANOMALY_COUNTER.labels(kind=kind).inc(count)


__all__ = [
    "CREDIT_GRANTED_COUNTER",
    "PURCHASE_COUNTER",
    "PrometheusMiddleware",
    "REPORT_ANOMALY_COUNTER",
    "REPORT_EXPORT_COUNTER",
    "REQUEST_COUNTER",
    "REQUEST_ERROR_COUNTER",
    "REQUEST_LATENCY_SECONDS",
    "metrics_endpoint",
    "metrics_router",
    "report_anomalies",
    "report_export",
]
