"""Employee onboarding endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from company_store.api.deps import get_db_session
from company_store.api.routes.auth import AuthenticatedUser, get_current_user
from company_store.schemas.employee import EmployeeRead, OnboardingRequest
from company_store.services.employees import (
    EmployeeAlreadyRegisteredError,
    EmployeeService,
    OnboardingPayload,
)

router = APIRouter(prefix="/employees")


@router.get("/me", response_model=EmployeeRead)
def read_my_employee(
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> EmployeeRead:
    employee = EmployeeService(session).find(user.user_id)
    if employee is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Onboarding required")
    return EmployeeRead.model_validate(employee)


@router.post("/me", response_model=EmployeeRead, status_code=status.HTTP_201_CREATED)
def onboard(
    payload: OnboardingRequest,
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> EmployeeRead:
    service = EmployeeService(session)
    try:
        employee = service.onboard(
            user_id=user.user_id,
            payload=OnboardingPayload(name=payload.name, sector=payload.sector, company=payload.company),
        )
    except EmployeeAlreadyRegisteredError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    return EmployeeRead.model_validate(employee)


__all__ = ["onboard", "read_my_employee", "router"]
