"""Settings base do serviço de Examples.

Configurações comuns a todos os componentes.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

Environment = Literal["development", "test", "staging", "production"]

SUPPORTED_LANGUAGES = ("en", "pt")


@dataclass(frozen=True)
class BaseSettings:
    """Configurações base do sistema.

    Attributes:
        environment: Ambiente de execução (development|test|staging|production)
        service_name: Nome do serviço para logs e tracing
        version: Versão publicada da API
        debug: Modo debug ativo
        log_level: Nível de log (DEBUG..CRITICAL)
        log_format: Formato dos logs (json|console)
        default_language: Idioma padrão das mensagens de erro
    """

    environment: Environment = "development"
    service_name: str = "example-api"
    version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"
    default_language: str = "en"

    @property
    def is_production(self) -> bool:
        """Retorna True se ambiente é produção."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Retorna True se ambiente é desenvolvimento ou teste."""
        return self.environment in ("development", "test")

    def validate(self) -> list[str]:
        """Valida configurações base.

        Returns:
            Lista de erros (vazia = OK).
        """
        errors: list[str] = []

        if self.environment not in ("development", "test", "staging", "production"):
            errors.append(f"ENVIRONMENT inválido: {self.environment}")

        if not self.service_name:
            errors.append("SERVICE_NAME não pode ser vazio")

        if self.log_format not in ("json", "console"):
            errors.append(f"LOG_FORMAT inválido: {self.log_format}")

        if self.default_language not in SUPPORTED_LANGUAGES:
            errors.append(f"DEFAULT_LANGUAGE não suportado: {self.default_language}")

        return errors


def _parse_environment(env_str: str) -> Environment:
    """Converte string de ambiente para tipo Environment."""
    env_lower = env_str.lower()
    if env_lower in ("production", "prod"):
        return "production"
    if env_lower in ("staging", "stage"):
        return "staging"
    if env_lower == "test":
        return "test"
    return "development"


def _load_base_from_env() -> BaseSettings:
    """Carrega BaseSettings de variáveis de ambiente."""
    log_format = os.getenv("LOG_FORMAT", "json").lower()
    return BaseSettings(
        environment=_parse_environment(os.getenv("ENVIRONMENT", "development")),
        service_name=os.getenv("SERVICE_NAME", "example-api"),
        version=os.getenv("APP_VERSION", "1.0.0"),
        debug=os.getenv("DEBUG", "").lower() in ("true", "1", "yes"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_format="console" if log_format == "console" else "json",
        default_language=os.getenv("DEFAULT_LANGUAGE", "en").lower(),
    )


@lru_cache(maxsize=1)
def get_base_settings() -> BaseSettings:
    """Retorna instância cacheada de BaseSettings."""
    return _load_base_from_env()
