"""Filters aplicados ao handler raiz.

RequestContextFilter carimba cada record com o contexto da requisição
(correlation_id, user_id, language) e com service/environment.
EmailRedactionFilter garante que nenhum email completo chegue ao output,
mesmo quando o chamador esquece de mascarar o campo `email` do `extra`.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

# Campos de contexto e seus valores quando não há requisição ativa
CONTEXT_DEFAULTS: dict[str, str] = {
    "correlation_id": "",
    "user_id": "system",
    "language": "",
}

_FULL_EMAIL = re.compile(r"^([^@\s*]{1,2})[^@\s*]*@(\S+)$")


class RequestContextFilter(logging.Filter):
    """Injeta campos de contexto e identificação do serviço.

    `extra` explícito vence o getter: o consumidor de eventos, por exemplo,
    loga o correlation_id da mensagem e não o da task corrente.
    """

    def __init__(
        self,
        service_name: str,
        environment: str = "",
        getters: Mapping[str, Callable[[], str]] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._environment = environment
        self._getters = dict(getters or {})

    def filter(self, record: logging.LogRecord) -> bool:
        for field, default in CONTEXT_DEFAULTS.items():
            if getattr(record, field, None):
                continue
            getter = self._getters.get(field)
            setattr(record, field, getter() if getter else default)
        record.service = self._service_name
        if self._environment:
            record.environment = self._environment
        return True


class EmailRedactionFilter(logging.Filter):
    """Mascara `record.email` quando ele chega em claro."""

    def filter(self, record: logging.LogRecord) -> bool:
        email = getattr(record, "email", None)
        if isinstance(email, str):
            record.email = redact_email(email)
        return True


def redact_email(value: str) -> str:
    """`john@x.com` -> `jo***@x.com`; valores já mascarados passam intactos."""
    if "***" in value:
        return value
    match = _FULL_EMAIL.match(value)
    if match is None:
        return "***"
    return f"{match.group(1)}***@{match.group(2)}"
