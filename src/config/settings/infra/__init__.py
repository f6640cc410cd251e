"""Agregador de settings de infraestrutura.

Re-exporta todas as settings de infraestrutura para uso externo.
"""

from __future__ import annotations

from config.settings.infra.database import (
    DatabaseBackend,
    DatabaseSettings,
    get_database_settings,
)
from config.settings.infra.external_api import (
    ExternalAPISettings,
    get_external_api_settings,
)
from config.settings.infra.messaging import (
    MessagingBackend,
    MessagingSettings,
    get_messaging_settings,
)

__all__ = [
    # Database
    "DatabaseBackend",
    "DatabaseSettings",
    # External API
    "ExternalAPISettings",
    # Messaging
    "MessagingBackend",
    "MessagingSettings",
    "get_database_settings",
    "get_external_api_settings",
    "get_messaging_settings",
]
