"""Bootstrap da aplicação: inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings
e conecta implementações concretas aos protocolos.

Uso:
    from app.bootstrap import build_container, initialize_app

    # Na inicialização do serviço
    initialize_app()
    container = build_container()
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.bootstrap.dependencies import (
    Container,
    build_container,
    create_event_publisher,
    create_example_repository,
    create_external_api,
    create_localizer,
    create_task_runner,
)
from app.observability import get_correlation_id, get_language, get_user_id
from config.logging import configure_logging
from config.settings import (
    get_base_settings,
    get_database_settings,
    get_example_rules_settings,
    get_example_timeout_settings,
    get_external_api_settings,
    get_messaging_settings,
    get_server_settings,
)

if TYPE_CHECKING:
    from collections.abc import Callable

STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)

__all__ = [
    "Container",
    "build_container",
    "create_event_publisher",
    "create_example_repository",
    "create_external_api",
    "create_localizer",
    "create_task_runner",
    "initialize_app",
    "initialize_test_app",
    "validate_runtime_settings",
]


def _context_getters() -> dict[str, Callable[[], str]]:
    return {
        "correlation_id": get_correlation_id,
        "user_id": get_user_id,
        "language": get_language,
    }


def initialize_app() -> None:
    """Inicializa a aplicação com todas as configurações necessárias.

    Deve ser chamada uma vez no início do serviço.

    Configura logging estruturado (JSON ou console conforme LOG_FORMAT)
    com correlation_id, user_id e idioma do contexto da requisição.
    """
    base = get_base_settings()
    configure_logging(
        level=base.log_level,
        service_name=base.service_name,
        log_format=base.log_format,
        context_getters=_context_getters(),
        environment=base.environment,
    )


def initialize_test_app() -> None:
    """Inicializa a aplicação para testes (DEBUG, formato console)."""
    configure_logging(
        level="DEBUG",
        service_name=f"{get_base_settings().service_name}_test",
        log_format="console",
        context_getters=_context_getters(),
    )


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development`/`test` mantém alerta sem bloquear execução local.
    """
    base = get_base_settings()
    environment = base.environment
    strict_mode = environment in STRICT_VALIDATION_ENVS
    errors: list[str] = []

    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(f"server: {error}" for error in get_server_settings().validate())
    errors.extend(f"database: {error}" for error in get_database_settings().validate(base))
    errors.extend(f"external_api: {error}" for error in get_external_api_settings().validate())
    errors.extend(f"messaging: {error}" for error in get_messaging_settings().validate())
    errors.extend(f"rules: {error}" for error in get_example_rules_settings().validate())
    errors.extend(f"timeouts: {error}" for error in get_example_timeout_settings().validate())

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {environment}:\n{details}")
