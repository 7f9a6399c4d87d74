"""Attendant kiosk endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from company_store.api.deps import get_broadcaster, get_db_session, get_pin_verifier
from company_store.api.routes.auth import AuthenticatedUser, require_role
from company_store.api.routes.purchases import run_registration
from company_store.schemas.employee import KioskEmployee
from company_store.schemas.purchase import KioskPurchaseCreate, PurchaseResponse
from company_store.services.employees import EmployeeService
from company_store.services.hosted import HostedServiceError
from company_store.services.kiosk import KioskService, PinVerificationError, PinVerifier
from company_store.services.notifications import PurchaseBroadcaster
from company_store.services.purchases import PurchasePayload

router = APIRouter(prefix="/kiosk")

kiosk_operator = require_role("kiosk", "admin")


@router.get("/employees", response_model=list[KioskEmployee])
def list_kiosk_employees(
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(kiosk_operator),
) -> list[KioskEmployee]:
    employees = EmployeeService(session).list_active()
    return [KioskEmployee.model_validate(employee) for employee in employees]


@router.post("/purchases", response_model=PurchaseResponse, status_code=status.HTTP_201_CREATED)
def create_kiosk_purchase(
    payload: KioskPurchaseCreate,
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(kiosk_operator),
    verifier: PinVerifier = Depends(get_pin_verifier),
    broadcaster: PurchaseBroadcaster | None = Depends(get_broadcaster),
) -> PurchaseResponse:
    service = KioskService(session, verifier=verifier, broadcaster=broadcaster)
    try:
        result = run_registration(
            service.register,
            attendant_id=user.user_id,
            user_id=payload.user_id,
            pin=payload.pin,
            payload=PurchasePayload(item=payload.item, qty=payload.qty, use_credit=payload.use_credit),
        )
    except PinVerificationError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except HostedServiceError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return PurchaseResponse.from_result(result)


__all__ = ["create_kiosk_purchase", "list_kiosk_employees", "router"]
