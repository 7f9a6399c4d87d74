"""Attendant-operated purchases on behalf of an employee."""
from __future__ import annotations

import logging
from typing import Protocol

from sqlalchemy.orm import Session

from company_store.core.config import Settings
from company_store.services.employees import EmployeeService
from company_store.services.hosted import HostedServiceClient
from company_store.services.notifications import PurchaseBroadcaster
from company_store.services.purchases import PurchasePayload, PurchaseResult, PurchaseService

logger = logging.getLogger(__name__)

KIOSK_CHANNEL = "kiosk"


class PinVerificationError(RuntimeError):
    """Raised when the employee PIN is malformed or rejected."""


class PinVerifier(Protocol):
    def verify(self, *, user_id: str, pin: str) -> bool:
        """Return True when ``pin`` belongs to ``user_id``."""


class HostedPinVerifier:
    """Checks PINs with the hosted ``verify_employee_pin`` procedure; hashes never leave the service."""

    procedure = "verify_employee_pin"

    def __init__(self, client: HostedServiceClient) -> None:
        self._client = client

    def verify(self, *, user_id: str, pin: str) -> bool:
        result = self._client.rpc(self.procedure, {"p_user_id": user_id, "p_pin": pin})
        return result is True


class KioskService:
    def __init__(
        self,
        session: Session,
        *,
        verifier: PinVerifier,
        settings: Settings | None = None,
        broadcaster: PurchaseBroadcaster | None = None,
    ) -> None:
        self._session = session
        self._verifier = verifier
        self._purchases = PurchaseService(session, settings=settings, broadcaster=broadcaster)

    def register(
        self,
        *,
        attendant_id: str,
        user_id: str,
        pin: str,
        payload: PurchasePayload,
    ) -> PurchaseResult:
        if not pin.isdigit() or not 4 <= len(pin) <= 6:
            raise PinVerificationError("PIN must have 4 to 6 digits")
        EmployeeService(self._session).get_active(user_id)
        if not self._verifier.verify(user_id=user_id, pin=pin):
            logger.warning("kiosk PIN rejected", extra={"user_id": user_id, "attendant_id": attendant_id})
            raise PinVerificationError("Invalid PIN")

        kiosk_payload = PurchasePayload(
            item=payload.item,
            qty=payload.qty,
            use_credit=payload.use_credit,
            channel=KIOSK_CHANNEL,
        )
        return self._purchases.register(user_id=user_id, payload=kiosk_payload)


__all__ = ["HostedPinVerifier", "KIOSK_CHANNEL", "KioskService", "PinVerificationError", "PinVerifier"]
