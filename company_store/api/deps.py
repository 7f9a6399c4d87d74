"""Common dependencies for API routes."""
from __future__ import annotations

from collections.abc import Iterator

from fastapi import Request
from sqlalchemy.orm import Session

from company_store.core.config import get_settings
from company_store.db.session import SessionLocal
from company_store.services.hosted import HostedServiceClient
from company_store.services.kiosk import HostedPinVerifier, PinVerifier
from company_store.services.notifications import PurchaseBroadcaster


def get_db_session() -> Iterator[Session]:
    """Yield a database session for FastAPI dependencies."""

    session: Session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def get_broadcaster(request: Request) -> PurchaseBroadcaster | None:
    """Return the application-wide broadcaster opened by the lifespan handler."""
    return getattr(request.app.state, "broadcaster", None)


def get_pin_verifier() -> Iterator[PinVerifier]:
    client = HostedServiceClient.from_settings(get_settings())
    try:
        yield HostedPinVerifier(client)
    finally:
        client.close()


__all__ = ["get_broadcaster", "get_db_session", "get_pin_verifier"]
