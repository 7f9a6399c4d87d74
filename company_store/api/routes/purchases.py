"""Self-service purchase endpoints."""
from __future__ import annotations

from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from company_store.api.deps import get_broadcaster, get_db_session
from company_store.api.routes.auth import AuthenticatedUser, get_current_user
from company_store.schemas.purchase import (
    MonthlyPurchasesResponse,
    PurchaseCreate,
    PurchaseRead,
    PurchaseResponse,
)
from company_store.services.catalog import UnknownItemError
from company_store.services.employees import EmployeeNotFoundError, InactiveEmployeeError
from company_store.services.notifications import PurchaseBroadcaster
from company_store.services.purchases import (
    CreditSettlementConflict,
    PurchasePayload,
    PurchaseResult,
    PurchaseService,
)

router = APIRouter(prefix="/purchases")


def run_registration(register: Callable[..., PurchaseResult], **kwargs: Any) -> PurchaseResult:
    """Call a purchase registration and translate domain errors to HTTP errors."""

    try:
        return register(**kwargs)
    except UnknownItemError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except EmployeeNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except (InactiveEmployeeError, CreditSettlementConflict) as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.post("", response_model=PurchaseResponse, status_code=status.HTTP_201_CREATED)
def create_purchase(
    payload: PurchaseCreate,
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
    broadcaster: PurchaseBroadcaster | None = Depends(get_broadcaster),
) -> PurchaseResponse:
    service = PurchaseService(session, broadcaster=broadcaster)
    result = run_registration(
        service.register,
        user_id=user.user_id,
        payload=PurchasePayload(item=payload.item, qty=payload.qty, use_credit=payload.use_credit),
    )
    return PurchaseResponse.from_result(result)


@router.get("/me", response_model=MonthlyPurchasesResponse)
def list_my_purchases(
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> MonthlyPurchasesResponse:
    month = PurchaseService(session).list_month(user_id=user.user_id)
    return MonthlyPurchasesResponse(
        period=month.period.label,
        total=month.total,
        purchases=[PurchaseRead.from_model(item) for item in month.purchases],
    )


__all__ = ["create_purchase", "list_my_purchases", "router", "run_registration"]
