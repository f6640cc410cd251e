"""Exceções de domínio para falhas recuperáveis de infraestrutura."""

from __future__ import annotations


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura transitórias."""


class RepositoryConnectionError(InfrastructureError):
    """Falha de conexão com o backend de persistência."""


class RepositoryTimeoutError(InfrastructureError):
    """Operação no backend de persistência excedeu o tempo limite."""


class ExternalServiceCallError(InfrastructureError):
    """Base para falhas ao chamar o colaborador externo."""


class ExternalServiceUnavailableError(ExternalServiceCallError):
    """Colaborador externo indisponível ou respondeu com erro."""


class ExternalServiceTimeoutError(ExternalServiceCallError):
    """Chamada ao colaborador externo excedeu o tempo limite."""


class MessagingError(InfrastructureError):
    """Falha ao publicar ou consumir eventos."""


class RedisConnectionError(MessagingError):
    """Falha de conexão/timeout ao acessar Redis."""
