"""Protocolos e contratos do core da aplicação."""

from .event_publisher import EventPublisherProtocol
from .example_repository import (
    ExampleAlreadyExistsError,
    ExampleNotFoundError,
    ExampleRepositoryProtocol,
    RepositoryError,
)
from .external_example_api import ExternalExampleAPIProtocol, ExternalExampleData

__all__ = [
    "EventPublisherProtocol",
    "ExampleAlreadyExistsError",
    "ExampleNotFoundError",
    "ExampleRepositoryProtocol",
    "ExternalExampleAPIProtocol",
    "ExternalExampleData",
    "RepositoryError",
]
