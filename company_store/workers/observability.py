"""Shared observability helpers for worker processes."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

from opentelemetry.trace import Span

from company_store.core.config import get_settings
from company_store.core.logging import configure_logging
from company_store.obs import initialise_tracing, traced


def configure_worker(service_name: str) -> None:
    """Configure logging and tracing for a worker service."""

    settings = get_settings()
    configure_logging(settings.log_config_path)
    if settings.enable_tracing:
        initialise_tracing(
            service_name=service_name,
            endpoint=settings.otel_exporter_endpoint,
            instrument_logging=False,
        )


@contextmanager
def worker_span(name: str, **attributes: Any) -> Iterator[Span]:
    """Context manager that starts a worker span and attaches optional attributes."""

    with traced(name, **attributes) as span:
        yield span


__all__ = ["configure_worker", "worker_span"]
