"""Credit issuance endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from company_store.api.deps import get_db_session
from company_store.api.routes.auth import AuthenticatedUser, require_role
from company_store.schemas.credit import CreditGrantRequest, CreditGrantResponse
from company_store.services.credits import CreditGrantPayload, CreditService
from company_store.services.employees import EmployeeNotFoundError, InactiveEmployeeError

router = APIRouter(prefix="/credits")


@router.post("", response_model=CreditGrantResponse, status_code=status.HTTP_201_CREATED)
def grant_credit(
    payload: CreditGrantRequest,
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(require_role("admin")),
) -> CreditGrantResponse:
    service = CreditService(session)
    try:
        result = service.grant(
            payload=CreditGrantPayload(user_id=payload.user_id, amount=payload.amount, note=payload.note),
            granted_by=user.user_id,
        )
    except EmployeeNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except InactiveEmployeeError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

    entry = result.entry
    return CreditGrantResponse(
        id=entry.id,
        user_id=entry.user_id,
        amount=entry.amount,
        note=entry.note,
        credit_balance=result.credit_balance,
        created_at=entry.created_at,
    )


__all__ = ["grant_credit", "router"]
