"""Registro de métricas via structured logging.

As métricas são registradas como logs estruturados e podem ser agregadas
posteriormente (BigQuery, CloudWatch Insights, Loki etc.).

Métricas suportadas:
- Latência: histogram de tempos de execução por componente/operação
- Chamadas externas: counter de resultado (ok|error|timeout) por operação

Uso:
    start = time.perf_counter()
    # ... operação ...
    record_latency("example_use_case", "get_example", (time.perf_counter() - start) * 1000)
    record_external_call("fetch_data", "timeout", 5001.2)
"""

from __future__ import annotations

import logging
from typing import Literal

logger = logging.getLogger(__name__)

ExternalCallOutcome = Literal["ok", "error", "timeout", "rejected"]


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "http", "example_use_case")
        operation: Nome da operação (ex: "GET /api/v1/examples")
        latency_ms: Latência em milissegundos
        correlation_id: ID de correlação (default: do contexto, via filter)
    """
    extra: dict[str, object] = {
        "metric_type": "latency",
        "component": component,
        "operation": operation,
        "latency_ms": round(latency_ms, 2),
    }
    if correlation_id:
        extra["correlation_id"] = correlation_id
    logger.info("metric_latency", extra=extra)


def record_external_call(
    operation: str,
    outcome: ExternalCallOutcome,
    latency_ms: float,
) -> None:
    """Registra resultado de chamada ao colaborador externo.

    Args:
        operation: fetch_data | validate | enrich | notify_created
        outcome: ok | error | timeout | rejected
        latency_ms: Latência em milissegundos
    """
    logger.info(
        "metric_external_call",
        extra={
            "metric_type": "external_call",
            "component": "external_api",
            "operation": operation,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        },
    )
