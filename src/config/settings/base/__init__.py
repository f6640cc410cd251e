"""Settings comuns: ambiente, logging, idioma padrão e servidor HTTP."""

from __future__ import annotations

from config.settings.base.core import (
    SUPPORTED_LANGUAGES,
    BaseSettings,
    Environment,
    get_base_settings,
)
from config.settings.base.server import ServerSettings, get_server_settings

__all__ = [
    "SUPPORTED_LANGUAGES",
    "BaseSettings",
    "Environment",
    "ServerSettings",
    "get_base_settings",
    "get_server_settings",
]
