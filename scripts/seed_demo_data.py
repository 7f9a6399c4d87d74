"""Seed demo employees, profiles and an opening credit grant."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from company_store.db.session import engine, session_scope
from company_store.models import Base, Company, CreditLedgerEntry, Employee, Profile

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEMO_EMPLOYEES = [
    # user_id, name, sector, company, is_admin, is_kiosk
    ("demo-admin", "Ana Admin", "Finance", Company.FA, True, False),
    ("demo-kiosk", "Kiosk Counter", "Reception", Company.FA, False, True),
    ("demo-employee-fa", "Bruno Souza", "Logistics", Company.FA, False, False),
    ("demo-employee-bf", "Carla Lima", "Sales", Company.BF, False, False),
]

OPENING_CREDIT = Decimal("20.00")


def seed(session: Session) -> None:
    """Create the demo employees that do not exist yet."""

    existing = set(session.scalars(select(Employee.user_id)))
    for user_id, name, sector, company, is_admin, is_kiosk in DEMO_EMPLOYEES:
        if user_id in existing:
            logger.info("Employee %s already exists", user_id)
            continue
        employee = Employee(
            user_id=user_id,
            name=name,
            sector=sector,
            company=company.value,
            active=True,
            credit_balance=OPENING_CREDIT,
        )
        session.add(employee)
        session.flush()
        session.add(Profile(user_id=user_id, employee_id=employee.id, is_admin=is_admin, is_kiosk=is_kiosk))
        session.add(
            CreditLedgerEntry(
                user_id=user_id,
                amount=OPENING_CREDIT,
                note="Opening balance",
                granted_by="demo-admin",
                created_at=datetime.now(timezone.utc),
            )
        )
        logger.info("Added employee %s", user_id)


def main() -> None:
    Base.metadata.create_all(bind=engine)
    with session_scope() as session:
        seed(session)


if __name__ == "__main__":
    main()
