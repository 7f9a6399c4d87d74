"""Employee onboarding and lookups."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from company_store.models import Company, Employee, Profile


class EmployeeError(RuntimeError):
    """Base exception for employee lookups and onboarding."""


class EmployeeNotFoundError(EmployeeError):
    """Raised when no employee is registered for a user id."""


class InactiveEmployeeError(EmployeeError):
    """Raised when the employee exists but has been deactivated."""


class EmployeeAlreadyRegisteredError(EmployeeError):
    """Raised when onboarding is attempted twice for the same user."""


@dataclass(slots=True, frozen=True)
class OnboardingPayload:
    name: str
    sector: str
    company: Company


class EmployeeService:
    def __init__(self, session: Session) -> None:
        self._session = session

    def find(self, user_id: str) -> Employee | None:
        return self._session.scalar(select(Employee).where(Employee.user_id == user_id))

    def get_active(self, user_id: str) -> Employee:
        employee = self.find(user_id)
        if employee is None:
            raise EmployeeNotFoundError(f"No employee registered for user '{user_id}'")
        if not employee.active:
            raise InactiveEmployeeError(f"Employee '{employee.name}' is inactive")
        return employee

    def list_active(self) -> list[Employee]:
        statement = select(Employee).where(Employee.active.is_(True)).order_by(Employee.name, Employee.user_id)
        return list(self._session.scalars(statement))

    def onboard(self, *, user_id: str, payload: OnboardingPayload) -> Employee:
        """Create the caller's employee record and link it to their profile."""

        name, sector = payload.name.strip(), payload.sector.strip()
        if not name or not sector:
            raise ValueError("name and sector are required")
        if self.find(user_id) is not None:
            raise EmployeeAlreadyRegisteredError(f"User '{user_id}' already completed onboarding")

        employee = Employee(
            user_id=user_id,
            name=name,
            sector=sector,
            company=payload.company.value,
            active=True,
            credit_balance=Decimal("0"),
        )
        self._session.add(employee)
        try:
            self._session.flush()
        except IntegrityError as exc:
            self._session.rollback()
            raise EmployeeAlreadyRegisteredError(f"User '{user_id}' already completed onboarding") from exc

        profile = self._session.get(Profile, user_id)
        if profile is None:
            profile = Profile(user_id=user_id)
            self._session.add(profile)
        profile.employee_id = employee.id
        self._session.commit()
        self._session.refresh(employee)
        return employee


__all__ = [
    "EmployeeAlreadyRegisteredError",
    "EmployeeError",
    "EmployeeNotFoundError",
    "EmployeeService",
    "InactiveEmployeeError",
    "OnboardingPayload",
]
