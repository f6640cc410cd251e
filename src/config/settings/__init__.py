"""Agregador de settings do serviço de Examples.

Re-exporta todas as settings e funções de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

# Base settings
from config.settings.base import (
    SUPPORTED_LANGUAGES,
    BaseSettings,
    Environment,
    ServerSettings,
    get_base_settings,
    get_server_settings,
)

# Domain settings
from config.settings.examples import (
    ExampleRulesSettings,
    ExampleTimeoutSettings,
    get_example_rules_settings,
    get_example_timeout_settings,
)

# Infrastructure settings
from config.settings.infra import (
    DatabaseBackend,
    DatabaseSettings,
    ExternalAPISettings,
    MessagingBackend,
    MessagingSettings,
    get_database_settings,
    get_external_api_settings,
    get_messaging_settings,
)

__all__ = [
    # Constants
    "SUPPORTED_LANGUAGES",
    # Base
    "BaseSettings",
    # Infrastructure
    "DatabaseBackend",
    "DatabaseSettings",
    "Environment",
    # Domain
    "ExampleRulesSettings",
    "ExampleTimeoutSettings",
    "ExternalAPISettings",
    "MessagingBackend",
    "MessagingSettings",
    "ServerSettings",
    "clear_settings_cache",
    "get_base_settings",
    "get_database_settings",
    "get_example_rules_settings",
    "get_example_timeout_settings",
    "get_external_api_settings",
    "get_messaging_settings",
    "get_server_settings",
]


def clear_settings_cache() -> None:
    """Limpa caches de settings (útil em testes que alteram env)."""
    for getter in (
        get_base_settings,
        get_server_settings,
        get_database_settings,
        get_external_api_settings,
        get_messaging_settings,
        get_example_rules_settings,
        get_example_timeout_settings,
    ):
        getter.cache_clear()
