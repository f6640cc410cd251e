"""Observabilidade: contexto de requisição e métricas.

Uso:
    from app.observability import get_correlation_id, set_correlation_id
    from app.observability import record_latency, record_external_call
"""

from app.observability.correlation import (
    DEFAULT_USER_ID,
    generate_correlation_id,
    get_correlation_id,
    get_language,
    get_user_id,
    reset_correlation_id,
    reset_language,
    reset_user_id,
    set_correlation_id,
    set_language,
    set_user_id,
)
from app.observability.metrics import record_external_call, record_latency

__all__ = [
    "DEFAULT_USER_ID",
    "generate_correlation_id",
    "get_correlation_id",
    "get_language",
    "get_user_id",
    "record_external_call",
    "record_latency",
    "reset_correlation_id",
    "reset_language",
    "reset_user_id",
    "set_correlation_id",
    "set_language",
    "set_user_id",
]
