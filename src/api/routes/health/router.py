"""Endpoints de health check (liveness/readiness)."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Literal

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.routes.examples.dto import HealthResponseDTO
from app.infra.external import MockExternalExampleAPI
from config.settings import get_base_settings

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

DATABASE_PING_TIMEOUT = 3.0
REDIS_PING_TIMEOUT = 2.0

router = APIRouter()


@dataclass(frozen=True, slots=True)
class DependencyCheck:
    """Resultado de checagem de dependência."""

    status: Literal["ok", "degraded", "failed"]
    latency_ms: float | None = None
    error: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "latency_ms": self.latency_ms,
            "error": self.error,
        }


def _health_payload(request: Request) -> HealthResponseDTO:
    base = get_base_settings()
    container = getattr(request.app.state, "container", None)
    services = {
        "database": "configured" if container is not None else "not_configured",
        "external_api": _external_api_mode(container),
        "messaging": "enabled" if getattr(container, "publisher", None) else "disabled",
    }
    return HealthResponseDTO(
        status="healthy",
        service=base.service_name,
        version=base.version,
        timestamp=datetime.now(UTC).isoformat(),
        services=services,
    )


def _external_api_mode(container: Any | None) -> str:
    external_api = getattr(container, "external_api", None)
    if external_api is None:
        return "not_configured"
    return "mock" if isinstance(external_api, MockExternalExampleAPI) else "http"


@router.get("/health", response_model=HealthResponseDTO)
async def health_check(request: Request) -> HealthResponseDTO:
    """Liveness probe: verifica se o serviço está rodando."""
    return _health_payload(request)


@router.get("/api/v1/health", response_model=HealthResponseDTO)
async def api_health_check(request: Request) -> HealthResponseDTO:
    return _health_payload(request)


@router.get("/ready")
async def readiness_check(request: Request) -> JSONResponse:
    """Readiness probe com verificação real do repositório e do Redis (se houver)."""
    container = getattr(request.app.state, "container", None)
    database_check, redis_check = await asyncio.gather(
        _check_repository(getattr(container, "repository", None)),
        _check_redis(getattr(container, "redis_client", None)),
    )

    ready = database_check.status == "ok" and redis_check.status in {"ok", "degraded"}
    payload = {
        "status": "ready" if ready else "not_ready",
        "checks": {
            "database": database_check.as_dict(),
            "redis": redis_check.as_dict(),
        },
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return JSONResponse(content=payload, status_code=200 if ready else 503)


async def _probe(
    ping: Callable[[], Awaitable[Any]],
    timeout: float,
    component: str,
) -> DependencyCheck:
    started_at = time.perf_counter()
    try:
        await asyncio.wait_for(ping(), timeout=timeout)
    except TimeoutError:
        return DependencyCheck(status="failed", error="timeout")
    except Exception as exc:
        logger.warning(
            "readiness_check_failed",
            extra={"component": component, "error_type": type(exc).__name__},
        )
        return DependencyCheck(status="failed", error=type(exc).__name__)
    return DependencyCheck(
        status="ok",
        latency_ms=round((time.perf_counter() - started_at) * 1000, 2),
    )


async def _check_repository(repository: Any | None) -> DependencyCheck:
    if repository is None:
        return DependencyCheck(status="failed", error="not_configured")
    return await _probe(repository.ping, DATABASE_PING_TIMEOUT, "database")


async def _check_redis(redis_client: Any | None) -> DependencyCheck:
    # Sem Redis o serviço opera com publisher em memória
    if redis_client is None:
        return DependencyCheck(status="degraded", error="not_configured")
    return await _probe(redis_client.ping, REDIS_PING_TIMEOUT, "redis")
