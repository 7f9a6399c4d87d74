"""HTTP client for the hosted database service (REST tables, RPC and realtime broadcast)."""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import httpx

from company_store.core.config import Settings, get_settings

QueryParams = Sequence[tuple[str, str]]


class HostedServiceError(RuntimeError):
    """Raised when the hosted service rejects a call or cannot be reached."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("message", "error_description", "error", "msg"):
            if body.get(key):
                return str(body[key])
    return response.text


class HostedServiceClient:
    """Synchronous wrapper around the hosted service HTTP API."""

    def __init__(
        self,
        base_url: str,
        *,
        api_key: str,
        access_token: str | None = None,
        timeout: float | None = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {access_token or api_key}",
        }
        self._timeout = timeout
        self._client = client or httpx.Client()
        self._owns_client = client is None

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        *,
        access_token: str | None = None,
        client: httpx.Client | None = None,
    ) -> "HostedServiceClient":
        settings = settings or get_settings()
        return cls(
            settings.hosted_service_url,
            api_key=settings.hosted_service_key,
            access_token=access_token,
            timeout=settings.hosted_service_timeout_seconds,
            client=client,
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HostedServiceClient":  # pragma: no cover - convenience
        return self

    def __exit__(self, *_args: object) -> None:  # pragma: no cover - convenience
        self.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(
                method,
                f"{self._base_url}{path}",
                headers=self._headers,
                timeout=self._timeout,
                **kwargs,
            )
        except httpx.HTTPError as exc:
            raise HostedServiceError(str(exc)) from exc
        if response.is_error:
            raise HostedServiceError(_error_message(response), status_code=response.status_code)
        return response

    def select(self, table: str, params: QueryParams) -> list[dict[str, Any]]:
        """Read rows from ``table`` using PostgREST filter parameters."""
        response = self._request("GET", f"/rest/v1/{table}", params=list(params))
        try:
            rows = response.json()
        except ValueError as exc:
            raise HostedServiceError(f"Malformed response for table '{table}'") from exc
        if not isinstance(rows, list):
            raise HostedServiceError(f"Malformed response for table '{table}'")
        return rows

    def rpc(self, name: str, payload: dict[str, Any]) -> Any:
        """Invoke a stored procedure and return its decoded result."""
        response = self._request("POST", f"/rest/v1/rpc/{name}", json=payload)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise HostedServiceError(f"Malformed response for procedure '{name}'") from exc

    def broadcast(self, topic: str, event: str, payload: dict[str, Any]) -> None:
        self._request(
            "POST",
            "/realtime/v1/api/broadcast",
            json={"messages": [{"topic": topic, "event": event, "payload": payload}]},
        )


__all__ = ["HostedServiceClient", "HostedServiceError", "QueryParams"]
