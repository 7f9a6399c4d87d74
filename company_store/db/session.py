"""Engine and session factory for the store database."""
from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from company_store.core.config import Settings, get_settings
from company_store.obs import instrument_sqlalchemy_engine


def build_engine(settings: Settings) -> Engine:
    """Create the engine for ``settings.database_url``.

    SQLite connections are shared across the threads FastAPI runs sync
    handlers on, so the same-thread check is disabled for them.
    """
    options: dict[str, Any] = {"pool_pre_ping": True}
    if settings.database_url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
    store_engine = create_engine(settings.database_url, **options)
    if settings.enable_tracing:
        instrument_sqlalchemy_engine(store_engine)
    return store_engine


engine = build_engine(get_settings())
SessionLocal = sessionmaker(bind=engine, autoflush=False)


@contextmanager
def session_scope() -> Iterator[Session]:
    """Commit on success, roll back on any error."""
    with SessionLocal() as session:
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise


__all__ = ["SessionLocal", "build_engine", "engine", "session_scope"]
