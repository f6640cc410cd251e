"""Setup do logging do serviço.

    from config.logging import configure_logging, get_logger

    configure_logging(level="INFO", service_name="example-api", log_format="json")
    logger = get_logger(__name__)
    logger.info("example_created", extra={"example_id": "ex_123"})

Um único StreamHandler no logger raiz; libs ruidosas ficam em WARNING.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.filters import EmailRedactionFilter, RequestContextFilter
from config.logging.formatters import create_formatter

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from config.logging.formatters import LogFormat

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_SERVICE_NAME = "example-api"

# httpx loga cada request em INFO; o cliente externo já loga o que importa
NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access", "sqlalchemy.engine")


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    log_format: LogFormat = "json",
    context_getters: Mapping[str, Callable[[], str]] | None = None,
    environment: str = "",
) -> None:
    """Instala handler, formatter e filters no logger raiz.

    Pode ser chamada de novo (testes, reload): o handler anterior é trocado.

    Args:
        level: Nível mínimo (case-insensitive).
        service_name: Valor do campo `service`.
        log_format: "json" ou "console".
        context_getters: Getters por campo de contexto
            (correlation_id, user_id, language).
        environment: Incluído nos records quando informado.

    Raises:
        ValueError: Nível desconhecido.
    """
    normalized = level.upper()
    if normalized not in VALID_LOG_LEVELS:
        raise ValueError(
            f"LOG_LEVEL inválido: {level} (use {'/'.join(sorted(VALID_LOG_LEVELS))})"
        )

    handler = logging.StreamHandler()
    handler.setFormatter(create_formatter(log_format))
    handler.addFilter(RequestContextFilter(service_name, environment, context_getters))
    handler.addFilter(EmailRedactionFilter())

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(normalized)

    if normalized != "DEBUG":
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_fallback(
    logger: logging.Logger,
    component: str,
    reason: str | None = None,
    elapsed_ms: float | None = None,
) -> None:
    """Registra que uma operação seguiu sem uma dependência opcional.

    Usado quando a API externa não responde e o Example segue sem
    enriquecimento ou sem notificação. Nunca recebe PII.
    """
    extra: dict[str, object] = {"fallback_used": True, "component": component}
    if reason:
        extra["reason"] = reason
    if elapsed_ms is not None:
        extra["elapsed_ms"] = round(elapsed_ms, 2)
    logger.info("fallback_applied", extra=extra)
