"""Observability utilities."""

from .metrics import (
    CREDIT_GRANTED_COUNTER,
    PURCHASE_COUNTER,
    REPORT_ANOMALY_COUNTER,
    REPORT_EXPORT_COUNTER,
    REQUEST_COUNTER,
    REQUEST_ERROR_COUNTER,
    REQUEST_LATENCY_SECONDS,
    PrometheusMiddleware,
    metrics_router,
    report_anomalies,
    report_export,
)
from .tracing import (
    initialise_tracing,
    instrument_fastapi_app,
    instrument_sqlalchemy_engine,
    shutdown_tracing,
    traced,
)

__all__ = [
    "CREDIT_GRANTED_COUNTER",
    "PURCHASE_COUNTER",
    "PrometheusMiddleware",
    "REPORT_ANOMALY_COUNTER",
    "REPORT_EXPORT_COUNTER",
    "REQUEST_COUNTER",
    "REQUEST_ERROR_COUNTER",
    "REQUEST_LATENCY_SECONDS",
    "initialise_tracing",
    "instrument_fastapi_app",
    "instrument_sqlalchemy_engine",
    "metrics_router",
    "report_anomalies",
    "report_export",
    "shutdown_tracing",
    "traced",
]
