"""Contexto de requisição para rastreamento (correlation_id, user_id, idioma).

O correlation_id é propagado entre serviços e injetado em logs e eventos.
Usa ContextVar para ser thread/async-safe; tasks criadas com
asyncio.create_task herdam uma cópia do contexto no momento da criação.

Uso:
    from app.observability import get_correlation_id, set_correlation_id

    # Em middleware/handler
    token = set_correlation_id(request.headers.get("x-correlation-id"))
    try:
        # processar request
    finally:
        reset_correlation_id(token)
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token

DEFAULT_USER_ID = "system"

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")
_user_id: ContextVar[str] = ContextVar("user_id", default=DEFAULT_USER_ID)
_language: ContextVar[str] = ContextVar("language", default="")


def get_correlation_id() -> str:
    """Retorna o correlation_id do contexto atual (ou string vazia)."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id no contexto atual.

    Args:
        correlation_id: ID a definir. Se None, gera um novo UUID.

    Returns:
        Token para reset posterior via reset_correlation_id().
    """
    value = correlation_id or generate_correlation_id()
    return _correlation_id.set(value)


def reset_correlation_id(token: Token[str]) -> None:
    """Restaura o correlation_id ao valor anterior."""
    _correlation_id.reset(token)


def generate_correlation_id() -> str:
    """Gera um novo correlation_id (UUID v4)."""
    return str(uuid.uuid4())


def get_user_id() -> str:
    """Retorna o user_id do contexto atual ("system" fora de requisição)."""
    return _user_id.get()


def set_user_id(user_id: str | None) -> Token[str]:
    """Define o user_id no contexto atual."""
    return _user_id.set(user_id or DEFAULT_USER_ID)


def reset_user_id(token: Token[str]) -> None:
    """Restaura o user_id ao valor anterior."""
    _user_id.reset(token)


def get_language() -> str:
    """Retorna o idioma negociado da requisição (vazio = padrão)."""
    return _language.get()


def set_language(language: str) -> Token[str]:
    """Define o idioma da requisição atual."""
    return _language.set(language)


def reset_language(token: Token[str]) -> None:
    """Restaura o idioma ao valor anterior."""
    _language.reset(token)
