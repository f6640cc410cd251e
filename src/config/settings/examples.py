"""Settings de regras e timeouts do domínio de Examples.

Valores injetados no ExampleService/ExampleUseCase pelo bootstrap;
o core não lê variáveis de ambiente.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


def _split_csv(raw: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class ExampleRulesSettings:
    """Regras de negócio e paginação de Examples.

    Attributes:
        default_page_size: Limit usado quando o cliente não informa (ou <= 0)
        max_page_size: Limit máximo aceito
        min_age / max_age: Faixa de idade aceita
        min_name_length / max_name_length: Faixa de tamanho do nome
        corporate_domains: Sufixos de email corporativos
        corporate_min_age: Idade mínima para email corporativo
        vip_domains: Sufixos de email VIP
        vip_min_age: Idade mínima para email VIP
        blocked_names: Nomes rejeitados (comparação exata, case-sensitive)
    """

    default_page_size: int = 10
    max_page_size: int = 100
    min_age: int = 0
    max_age: int = 150
    min_name_length: int = 1
    max_name_length: int = 100
    corporate_domains: tuple[str, ...] = ("@corp.com", "@enterprise.com")
    corporate_min_age: int = 18
    vip_domains: tuple[str, ...] = ("@vip.com", "@premium.com")
    vip_min_age: int = 21
    blocked_names: tuple[str, ...] = ("badword1", "badword2")

    def validate(self) -> list[str]:
        """Valida coerência das regras."""
        errors: list[str] = []

        if not 0 < self.default_page_size <= self.max_page_size:
            errors.append("EXAMPLES_DEFAULT_PAGE_SIZE deve estar em (0, MAX_PAGE_SIZE]")

        if self.min_age < 0 or self.min_age > self.max_age:
            errors.append("EXAMPLES_MIN_AGE/MAX_AGE inconsistentes")

        if self.min_name_length < 1 or self.min_name_length > self.max_name_length:
            errors.append("EXAMPLES_MIN_NAME_LENGTH/MAX_NAME_LENGTH inconsistentes")

        return errors


@dataclass(frozen=True)
class ExampleTimeoutSettings:
    """Timeouts das chamadas ao colaborador externo.

    Attributes:
        external_call_timeout_seconds: Prazo compartilhado do fan-out de
            enriquecimento e da validação externa
        notification_timeout_seconds: Prazo da notificação em background
        max_background_tasks: Concorrência máxima de tasks em background
    """

    external_call_timeout_seconds: float = 30.0
    notification_timeout_seconds: float = 30.0
    max_background_tasks: int = 100

    def validate(self) -> list[str]:
        """Valida timeouts."""
        errors: list[str] = []
        if self.external_call_timeout_seconds <= 0:
            errors.append("EXAMPLES_EXTERNAL_TIMEOUT deve ser > 0")
        if self.notification_timeout_seconds <= 0:
            errors.append("EXAMPLES_NOTIFY_TIMEOUT deve ser > 0")
        if self.max_background_tasks <= 0:
            errors.append("EXAMPLES_MAX_BACKGROUND_TASKS deve ser > 0")
        return errors


def _load_rules_from_env() -> ExampleRulesSettings:
    """Carrega ExampleRulesSettings de variáveis de ambiente."""
    defaults = ExampleRulesSettings()
    return ExampleRulesSettings(
        default_page_size=int(os.getenv("EXAMPLES_DEFAULT_PAGE_SIZE", "10")),
        max_page_size=int(os.getenv("EXAMPLES_MAX_PAGE_SIZE", "100")),
        min_age=int(os.getenv("EXAMPLES_MIN_AGE", "0")),
        max_age=int(os.getenv("EXAMPLES_MAX_AGE", "150")),
        min_name_length=int(os.getenv("EXAMPLES_MIN_NAME_LENGTH", "1")),
        max_name_length=int(os.getenv("EXAMPLES_MAX_NAME_LENGTH", "100")),
        corporate_domains=(
            _split_csv(os.getenv("EXAMPLES_CORPORATE_DOMAINS", ""))
            or defaults.corporate_domains
        ),
        corporate_min_age=int(os.getenv("EXAMPLES_CORPORATE_MIN_AGE", "18")),
        vip_domains=_split_csv(os.getenv("EXAMPLES_VIP_DOMAINS", "")) or defaults.vip_domains,
        vip_min_age=int(os.getenv("EXAMPLES_VIP_MIN_AGE", "21")),
        blocked_names=(
            _split_csv(os.getenv("EXAMPLES_BLOCKED_NAMES", "")) or defaults.blocked_names
        ),
    )


def _load_timeouts_from_env() -> ExampleTimeoutSettings:
    """Carrega ExampleTimeoutSettings de variáveis de ambiente."""
    return ExampleTimeoutSettings(
        external_call_timeout_seconds=float(os.getenv("EXAMPLES_EXTERNAL_TIMEOUT", "30")),
        notification_timeout_seconds=float(os.getenv("EXAMPLES_NOTIFY_TIMEOUT", "30")),
        max_background_tasks=int(os.getenv("EXAMPLES_MAX_BACKGROUND_TASKS", "100")),
    )


@lru_cache(maxsize=1)
def get_example_rules_settings() -> ExampleRulesSettings:
    """Retorna instância cacheada de ExampleRulesSettings."""
    return _load_rules_from_env()


@lru_cache(maxsize=1)
def get_example_timeout_settings() -> ExampleTimeoutSettings:
    """Retorna instância cacheada de ExampleTimeoutSettings."""
    return _load_timeouts_from_env()
