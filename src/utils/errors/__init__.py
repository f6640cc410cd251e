"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    ExternalServiceCallError,
    ExternalServiceTimeoutError,
    ExternalServiceUnavailableError,
    InfrastructureError,
    MessagingError,
    RedisConnectionError,
    RepositoryConnectionError,
    RepositoryTimeoutError,
)

__all__ = [
    "ExternalServiceCallError",
    "ExternalServiceTimeoutError",
    "ExternalServiceUnavailableError",
    "InfrastructureError",
    "MessagingError",
    "RedisConnectionError",
    "RepositoryConnectionError",
    "RepositoryTimeoutError",
]
