"""Cliente HTTP (httpx) do colaborador externo de Examples.

Endpoints consumidos (relativos a EXTERNAL_API_BASE_URL):
- GET  /examples/{id}             -> dados externos
- POST /examples/validate         -> {"valid": bool}
- GET  /examples/{id}/enrichment  -> dict de enriquecimento
- POST /examples/{id}/notify      -> notificação de criação

Sem retry: uma falha é reportada ao chamador, que decide o que fazer.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import TYPE_CHECKING, Any

import httpx

from app.observability import get_correlation_id, record_external_call
from app.protocols.external_example_api import ExternalExampleAPIProtocol, ExternalExampleData
from utils.errors import ExternalServiceTimeoutError, ExternalServiceUnavailableError

if TYPE_CHECKING:
    from config.settings import ExternalAPISettings

logger = logging.getLogger(__name__)


class HttpExternalExampleAPI(ExternalExampleAPIProtocol):
    """Implementação HTTP do colaborador externo.

    Args:
        settings: ExternalAPISettings (base_url, api_key, timeout, headers).
        http_client: Cliente httpx opcional (injetado em testes).
    """

    def __init__(
        self,
        settings: ExternalAPISettings,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        headers = {"Accept": "application/json", **settings.headers}
        if settings.api_key:
            headers["Authorization"] = f"Bearer {settings.api_key}"
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            base_url=settings.base_url,
            timeout=settings.timeout_seconds,
            headers=headers,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
    ) -> Any:
        started_at = time.perf_counter()
        headers = {}
        correlation_id = get_correlation_id()
        if correlation_id:
            headers["X-Correlation-ID"] = correlation_id
        try:
            response = await self._client.request(method, path, json=json, headers=headers)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            latency_ms = (time.perf_counter() - started_at) * 1000
            record_external_call(operation, "timeout", latency_ms)
            logger.warning("external_api_timeout", extra={"operation": operation})
            raise ExternalServiceTimeoutError(f"{operation} timed out") from exc
        except httpx.HTTPStatusError as exc:
            latency_ms = (time.perf_counter() - started_at) * 1000
            record_external_call(operation, "error", latency_ms)
            logger.warning(
                "external_api_http_error",
                extra={"operation": operation, "status_code": exc.response.status_code},
            )
            raise ExternalServiceUnavailableError(
                f"{operation} failed with status {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            latency_ms = (time.perf_counter() - started_at) * 1000
            record_external_call(operation, "error", latency_ms)
            logger.warning(
                "external_api_transport_error",
                extra={"operation": operation, "error_type": type(exc).__name__},
            )
            raise ExternalServiceUnavailableError(f"{operation} failed") from exc

        record_external_call(operation, "ok", (time.perf_counter() - started_at) * 1000)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ExternalServiceUnavailableError(f"{operation} returned invalid JSON") from exc

    async def fetch_data(self, example_id: str) -> ExternalExampleData:
        data = await self._request("fetch_data", "GET", f"/examples/{example_id}") or {}
        last_modified = data.get("last_modified")
        return ExternalExampleData(
            external_id=str(data.get("external_id", "")),
            metadata={str(k): str(v) for k, v in (data.get("metadata") or {}).items()},
            score=float(data.get("score", 0.0)),
            last_modified=datetime.fromisoformat(last_modified) if last_modified else None,
        )

    async def validate(self, name: str, email: str, age: int) -> bool:
        data = await self._request(
            "validate",
            "POST",
            "/examples/validate",
            json={"name": name, "email": email, "age": age},
        )
        return bool((data or {}).get("valid", False))

    async def enrich(self, example_id: str) -> dict[str, Any]:
        data = await self._request("enrich", "GET", f"/examples/{example_id}/enrichment")
        return dict(data or {})

    async def notify_created(self, example_id: str, email: str) -> None:
        await self._request(
            "notify_created",
            "POST",
            f"/examples/{example_id}/notify",
            json={"example_id": example_id, "email": email, "event": "example.created"},
        )
