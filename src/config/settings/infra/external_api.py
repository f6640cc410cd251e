"""Settings do colaborador externo de Examples."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache


@dataclass(frozen=True)
class ExternalAPISettings:
    """Configurações da API externa.

    Attributes:
        base_url: URL base da API externa
        api_key: Chave enviada em Authorization (Bearer)
        timeout_seconds: Timeout HTTP por requisição
        enable_mock: Usa implementação mock em vez de HTTP
        mock_delay_seconds: Latência simulada pelo mock
        mock_should_fail: Mock falha em todas as chamadas
        headers: Headers extras enviados em cada requisição
    """

    base_url: str = ""
    api_key: str = ""
    timeout_seconds: float = 30.0
    enable_mock: bool = True
    mock_delay_seconds: float = 0.1
    mock_should_fail: bool = False
    headers: dict[str, str] = field(default_factory=dict)

    def validate(self) -> list[str]:
        """Valida configurações da API externa."""
        errors: list[str] = []

        if not self.enable_mock and not self.base_url:
            errors.append("EXTERNAL_API_BASE_URL obrigatório quando mock desabilitado")

        if self.timeout_seconds <= 0:
            errors.append("EXTERNAL_API_TIMEOUT deve ser > 0")

        if self.mock_delay_seconds < 0:
            errors.append("EXTERNAL_API_MOCK_DELAY não pode ser negativo")

        return errors


def _parse_headers(raw: str) -> dict[str, str]:
    """Converte `k=v,k2=v2` em dict; entradas sem `=` são ignoradas."""
    headers: dict[str, str] = {}
    for item in raw.split(","):
        key, sep, value = item.partition("=")
        if sep and key.strip():
            headers[key.strip()] = value.strip()
    return headers


def _load_external_api_from_env() -> ExternalAPISettings:
    """Carrega ExternalAPISettings de variáveis de ambiente."""
    return ExternalAPISettings(
        base_url=os.getenv("EXTERNAL_API_BASE_URL", "").rstrip("/"),
        api_key=os.getenv("EXTERNAL_API_KEY", ""),
        timeout_seconds=float(os.getenv("EXTERNAL_API_TIMEOUT", "30")),
        enable_mock=os.getenv("EXTERNAL_API_ENABLE_MOCK", "true").lower() in ("true", "1"),
        mock_delay_seconds=float(os.getenv("EXTERNAL_API_MOCK_DELAY", "0.1")),
        mock_should_fail=os.getenv("EXTERNAL_API_MOCK_SHOULD_FAIL", "").lower() in ("true", "1"),
        headers=_parse_headers(os.getenv("EXTERNAL_API_HEADERS", "")),
    )


@lru_cache(maxsize=1)
def get_external_api_settings() -> ExternalAPISettings:
    """Retorna instância cacheada de ExternalAPISettings."""
    return _load_external_api_from_env()
