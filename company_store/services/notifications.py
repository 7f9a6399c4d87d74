"""Broadcast of registered purchases to listening store screens."""
from __future__ import annotations

import logging
from collections.abc import Callable
from threading import Lock

from company_store.core.config import Settings, get_settings
from company_store.models import Purchase
from company_store.services.catalog import item_label
from company_store.services.hosted import HostedServiceClient, HostedServiceError

logger = logging.getLogger(__name__)

PURCHASE_EVENT = "purchase_registered"


class PurchaseBroadcaster:
    """Owns the channel to the hosted realtime broadcast endpoint.

    The channel is opened on the first publish, reused afterwards and closed
    once by :meth:`close`. A closed broadcaster stays closed.
    """

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        client_factory: Callable[[], HostedServiceClient] | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._client_factory = client_factory or (lambda: HostedServiceClient.from_settings(self._settings))
        self._client: HostedServiceClient | None = None
        self._closed = False
        self._lock = Lock()

    @property
    def enabled(self) -> bool:
        return self._settings.broadcast_enabled

    @property
    def is_open(self) -> bool:
        return self._client is not None

    def _get_client(self) -> HostedServiceClient | None:
        with self._lock:
            if self._closed:
                return None
            if self._client is None:
                self._client = self._client_factory()
            return self._client

    def publish(self, purchase: Purchase, *, employee_name: str) -> bool:
        """Announce ``purchase``; failures are logged and reported as ``False``."""

        if not self.enabled:
            return False
        client = self._get_client()
        if client is None:
            logger.warning("purchase broadcaster already closed", extra={"purchase_id": purchase.id})
            return False
        payload = {
            "purchase_id": purchase.id,
            "name": employee_name,
            "item": item_label(purchase.item),
            "qty": purchase.qty,
            "total": str(purchase.total),
        }
        try:
            client.broadcast(self._settings.broadcast_topic, PURCHASE_EVENT, payload)
        except HostedServiceError:
            logger.warning("failed to broadcast purchase", exc_info=True, extra={"purchase_id": purchase.id})
            return False
        return True

    def close(self) -> None:
        with self._lock:
            self._closed = True
            client, self._client = self._client, None
        if client is not None:
            client.close()


__all__ = ["PURCHASE_EVENT", "PurchaseBroadcaster"]
