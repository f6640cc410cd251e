"""Settings do servidor HTTP."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class ServerSettings:
    """Configurações do servidor HTTP.

    Attributes:
        host: Interface de bind
        port: Porta HTTP
        enable_cors: Habilita CORS aberto (apenas dev)
        shutdown_timeout_seconds: Tempo máximo para drenar tasks no shutdown
    """

    host: str = "0.0.0.0"
    port: int = 8080
    enable_cors: bool = True
    shutdown_timeout_seconds: float = 30.0

    def validate(self) -> list[str]:
        """Valida configurações do servidor."""
        errors: list[str] = []
        if not 0 < self.port < 65536:
            errors.append(f"SERVER_PORT inválida: {self.port}")
        if self.shutdown_timeout_seconds <= 0:
            errors.append("SERVER_SHUTDOWN_TIMEOUT deve ser > 0")
        return errors


def _load_server_from_env() -> ServerSettings:
    """Carrega ServerSettings de variáveis de ambiente."""
    return ServerSettings(
        host=os.getenv("SERVER_HOST", "0.0.0.0"),
        port=int(os.getenv("SERVER_PORT", "8080")),
        enable_cors=os.getenv("SERVER_ENABLE_CORS", "true").lower() in ("true", "1"),
        shutdown_timeout_seconds=float(os.getenv("SERVER_SHUTDOWN_TIMEOUT", "30")),
    )


@lru_cache(maxsize=1)
def get_server_settings() -> ServerSettings:
    """Retorna instância cacheada de ServerSettings."""
    return _load_server_from_env()
