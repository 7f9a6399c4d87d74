from __future__ import annotations

import os
import sys
from collections.abc import Callable, Iterator
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from io import BytesIO
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

DATABASE_URL = "sqlite+pysqlite:///./test_suite.db"

os.environ.setdefault("DATABASE_URL", DATABASE_URL)
os.environ.setdefault("ENABLE_TRACING", "false")
os.environ.setdefault("ENABLE_METRICS", "true")
os.environ.setdefault("BROADCAST_ENABLED", "false")
os.environ.setdefault("REPORT_SOURCE", "database")

from botocore.exceptions import ClientError
from fastapi.testclient import TestClient
from jose import jwt  # type: ignore[import-untyped]
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from company_store.api.deps import get_db_session, get_pin_verifier
from company_store.core.config import get_settings
from company_store.main import app
from company_store.models import Base, Employee, Profile


class InMemoryS3Client:
    """Simple in-memory S3 stub used by the report archive during tests."""

    def __init__(self) -> None:
        self._buckets: dict[str, dict[str, bytes]] = {}
        self.metadata: dict[str, dict[str, str]] = {}

    def head_bucket(self, *, Bucket: str) -> None:
        if Bucket not in self._buckets:
            raise ClientError({"Error": {"Code": "404", "Message": "Not Found"}}, "HeadBucket")

    def create_bucket(self, *, Bucket: str, **_: object) -> None:
        self._buckets.setdefault(Bucket, {})

    def get_object(self, *, Bucket: str, Key: str) -> dict[str, BytesIO]:
        if Bucket not in self._buckets or Key not in self._buckets[Bucket]:
            raise ClientError({"Error": {"Code": "NoSuchKey"}}, "GetObject")
        return {"Body": BytesIO(self._buckets[Bucket][Key])}

    def put_object(
        self,
        *,
        Bucket: str,
        Key: str,
        Body: bytes,
        ContentType: str | None = None,
        Metadata: dict[str, str] | None = None,
        **_: object,
    ) -> dict[str, str]:
        bucket = self._buckets.setdefault(Bucket, {})
        bucket[Key] = Body.encode("utf-8") if isinstance(Body, str) else Body
        self.metadata[Key] = dict(Metadata or {})
        return {"ETag": "in-memory"}

    @property
    def buckets(self) -> dict[str, dict[str, bytes]]:
        return self._buckets


class StubPinVerifier:
    """Accepts only the PINs registered in ``pins``."""

    def __init__(self) -> None:
        self.pins: dict[str, str] = {}
        self.calls: list[tuple[str, str]] = []

    def verify(self, *, user_id: str, pin: str) -> bool:
        self.calls.append((user_id, pin))
        return self.pins.get(user_id) == pin


engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db_session() -> Iterator[Session]:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture()
def s3_client() -> InMemoryS3Client:
    return InMemoryS3Client()


@pytest.fixture()
def pin_verifier() -> StubPinVerifier:
    return StubPinVerifier()


@pytest.fixture()
def client(db_session: Session, pin_verifier: StubPinVerifier) -> Iterator[TestClient]:
    def override_get_db() -> Iterator[Session]:
        try:
            yield db_session
        finally:
            db_session.rollback()

    app.dependency_overrides[get_db_session] = override_get_db
    app.dependency_overrides[get_pin_verifier] = lambda: pin_verifier

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.pop(get_db_session, None)
    app.dependency_overrides.pop(get_pin_verifier, None)


def issue_token(user_id: str, *, email: str | None = None, expires_in: int = 3600) -> str:
    settings = get_settings()
    claims = {
        "sub": user_id,
        "email": email or f"{user_id}@example.com",
        "aud": settings.jwt_audience,
        "exp": int((datetime.now(timezone.utc) + timedelta(seconds=expires_in)).timestamp()),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def bearer(user_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_token(user_id)}"}


EmployeeFactory = Callable[..., Employee]


@pytest.fixture()
def make_employee(db_session: Session) -> EmployeeFactory:
    def _make(
        user_id: str,
        *,
        name: str | None = None,
        sector: str = "Operations",
        company: str = "FA",
        active: bool = True,
        credit_balance: str = "0",
        is_admin: bool = False,
        is_kiosk: bool = False,
    ) -> Employee:
        employee = Employee(
            user_id=user_id,
            name=name or user_id.title(),
            sector=sector,
            company=company,
            active=active,
            credit_balance=Decimal(credit_balance),
        )
        db_session.add(employee)
        db_session.flush()
        db_session.add(
            Profile(user_id=user_id, employee_id=employee.id, is_admin=is_admin, is_kiosk=is_kiosk)
        )
        db_session.commit()
        return employee

    return _make


@pytest.fixture()
def admin_headers(db_session: Session) -> dict[str, str]:
    db_session.add(Profile(user_id="admin-1", is_admin=True))
    db_session.commit()
    return bearer("admin-1")


@pytest.fixture()
def kiosk_headers(db_session: Session) -> dict[str, str]:
    db_session.add(Profile(user_id="kiosk-1", is_kiosk=True))
    db_session.commit()
    return bearer("kiosk-1")


@pytest.fixture()
def auth_headers() -> Callable[[str], dict[str, str]]:
    return bearer
